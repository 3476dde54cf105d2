from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.post_schema import PostResponse
from photofeed.schemas.user_schema import UserPublic
from photofeed.schemas.explore_schema import HashtagTrending
from photofeed.services.auth_service import get_current_user
from photofeed.services.explore_service import ExploreService
from photofeed.services.post_service import PostService
from photofeed.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/explore/trending", response_model=List[PostResponse])
async def get_trending_posts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Most liked posts"""
    try:
        return await PostService(db).get_trending_posts(current_user.id)
    except Exception as e:
        logger.error(f"Error fetching trending posts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch trending posts"
        )

@router.get("/explore/hashtags", response_model=List[HashtagTrending])
async def get_trending_hashtags(current_user: User = Depends(get_current_user)):
    """Trending hashtags"""
    return ExploreService().get_trending_hashtags()

@router.get("/explore/users", response_model=List[UserPublic])
async def get_suggested_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Users the current user might want to follow"""
    try:
        return await UserService(db).get_suggested_users(current_user.id)
    except Exception as e:
        logger.error(f"Error fetching suggested users: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch suggested users"
        )
