from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.base_schema import SuccessResponse
from photofeed.schemas.like_schema import SaveResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.post_service import PostService
from photofeed.services.save_service import SaveService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/posts/{post_id}/save", response_model=SaveResponse)
async def save_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save a post"""
    try:
        if not await PostService(db).post_exists(post_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )

        return await SaveService(db).save_post(current_user.id, post_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error saving post: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save post"
        )

@router.delete("/posts/{post_id}/save", response_model=SuccessResponse)
async def unsave_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove a post from the user's saved posts"""
    try:
        await SaveService(db).unsave_post(current_user.id, post_id)
        return SuccessResponse()
    except Exception as e:
        logger.error(f"Error unsaving post: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unsave post"
        )
