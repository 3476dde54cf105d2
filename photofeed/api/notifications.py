from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.notification_schema import NotificationResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/notifications", response_model=List[NotificationResponse])
async def get_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get recent activity on the user's posts and profile"""
    try:
        return await NotificationService(db).get_notifications(current_user.id)
    except Exception as e:
        logger.error(f"Error fetching notifications: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch notifications"
        )
