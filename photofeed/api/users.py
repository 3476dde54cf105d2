from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.user_schema import UserPublic
from photofeed.schemas.post_schema import PostResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.user_service import UserService
from photofeed.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/users/{username}", response_model=UserPublic)
async def get_user_profile(
    username: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get a profile with follow state and counts"""
    try:
        user_service = UserService(db)
        user = await user_service.get_user_by_username(username, current_user.id)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        return user
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user"
        )

@router.get("/users/{username}/posts", response_model=List[PostResponse])
async def get_user_posts(
    username: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get every post by a user"""
    try:
        user = await UserService(db).get_user_by_username(username)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        return await PostService(db).get_user_posts(user.id, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching user posts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user posts"
        )

@router.get("/users/{username}/saved", response_model=List[PostResponse])
async def get_saved_posts(
    username: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the posts a user saved; only the owner may look"""
    try:
        user = await UserService(db).get_user_by_username(username)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        if user.id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized"
            )

        return await PostService(db).get_saved_posts(current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching saved posts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch saved posts"
        )
