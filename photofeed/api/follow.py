from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.base_schema import SuccessResponse
from photofeed.schemas.follow_schema import FollowResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.follow_service import FollowService
from photofeed.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/users/{user_id}/follow", response_model=FollowResponse)
async def follow_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Follow a user"""
    try:
        target_user = await UserService(db).get_user(user_id)

        if not target_user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        return await FollowService(db).create_follow(current_user.id, user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error following user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to follow user"
        )

@router.delete("/users/{user_id}/follow", response_model=SuccessResponse)
async def unfollow_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Unfollow a user"""
    try:
        await FollowService(db).delete_follow(current_user.id, user_id)
        return SuccessResponse()
    except Exception as e:
        logger.error(f"Error unfollowing user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unfollow user"
        )
