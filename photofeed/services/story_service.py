from datetime import timedelta
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from photofeed.db.base import utcnow
from photofeed.models.user import User
from photofeed.models.follow import Follow
from photofeed.schemas.user_schema import UserResponse
from photofeed.schemas.explore_schema import StoryResponse

logger = logging.getLogger(__name__)

STORY_LIMIT = 5
STORY_LIFETIME = timedelta(hours=24)
# Stories after this position are reported as already viewed
UNVIEWED_STORIES = 3

class StoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_stories(self, user_id: str) -> List[StoryResponse]:
        """One story per followed user, built from their profile image"""
        stmt = select(User).join(
            Follow, Follow.following_id == User.id
        ).where(
            Follow.follower_id == user_id
        ).order_by(
            Follow.created_at
        ).limit(STORY_LIMIT)
        result = await self.db.execute(stmt)

        now = utcnow()
        return [
            StoryResponse(
                id=f"story-{user.id}",
                user=UserResponse.model_validate(user),
                image_url=user.profile_image_url or "",
                created_at=now,
                expires_at=now + STORY_LIFETIME,
                has_viewed=index >= UNVIEWED_STORIES,
            )
            for index, user in enumerate(result.scalars().all())
        ]
