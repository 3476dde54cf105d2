from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.base_schema import SuccessResponse
from photofeed.schemas.like_schema import LikeResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.like_service import LikeService
from photofeed.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/posts/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Like a post"""
    try:
        if not await PostService(db).post_exists(post_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )

        return await LikeService(db).create_like(current_user.id, post_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error liking post: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to like post"
        )

@router.delete("/posts/{post_id}/like", response_model=SuccessResponse)
async def unlike_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Unlike a post"""
    try:
        await LikeService(db).delete_like(current_user.id, post_id)
        return SuccessResponse()
    except Exception as e:
        logger.error(f"Error unliking post: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unlike post"
        )
