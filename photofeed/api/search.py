from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.explore_schema import SearchResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/search", response_model=SearchResponse)
async def search(
    q: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Search users, posts and hashtags"""
    try:
        return await SearchService(db).search(q or "", current_user.id)
    except Exception as e:
        logger.error(f"Error searching: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search"
        )
