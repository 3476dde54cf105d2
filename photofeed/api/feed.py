from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.post_schema import PostResponse
from photofeed.schemas.explore_schema import StoryResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.post_service import PostService
from photofeed.services.story_service import StoryService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/posts", response_model=List[PostResponse])
async def get_feed(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the user's feed: their own posts and posts of everyone they follow"""
    try:
        return await PostService(db).get_feed_posts(current_user.id)
    except Exception as e:
        logger.error(f"Error getting feed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch posts"
        )

@router.get("/stories", response_model=List[StoryResponse])
async def get_stories(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get stories from followed users"""
    try:
        return await StoryService(db).get_stories(current_user.id)
    except Exception as e:
        logger.error(f"Error fetching stories: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch stories"
        )
