from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, func
import logging

from photofeed.db.upsert import insert_or_ignore
from photofeed.models.follow import Follow

logger = logging.getLogger(__name__)

class FollowService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_follow(self, follower_id: str, following_id: str) -> Follow:
        """Follow a user; following them again returns the existing edge"""
        await insert_or_ignore(
            self.db,
            Follow,
            values={"follower_id": follower_id, "following_id": following_id},
            index_elements=["follower_id", "following_id"],
        )
        await self.db.commit()

        follow = await self.get_follow(follower_id, following_id)

        logger.info(f"User {follower_id} started following user {following_id}")

        return follow

    async def delete_follow(self, follower_id: str, following_id: str) -> None:
        """Unfollow a user; a missing edge is a no-op"""
        stmt = delete(Follow).where(
            and_(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        await self.db.execute(stmt)
        await self.db.commit()

        logger.info(f"User {follower_id} unfollowed user {following_id}")

    async def get_follow(self, follower_id: str, following_id: str) -> Optional[Follow]:
        stmt = select(Follow).where(
            and_(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count_edges(self, follower_id: str, following_id: str) -> int:
        stmt = select(func.count()).select_from(Follow).where(
            and_(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0
