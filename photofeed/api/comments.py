from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.comment_schema import CommentCreate, CommentResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.comment_service import CommentService
from photofeed.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Comment on a post"""
    try:
        if not await PostService(db).post_exists(post_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )

        return await CommentService(db).create_comment(
            user_id=current_user.id,
            post_id=post_id,
            content=comment_data.content
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating comment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create comment"
        )
