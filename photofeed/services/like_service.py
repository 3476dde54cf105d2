from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, func
import logging

from photofeed.db.upsert import insert_or_ignore
from photofeed.models.like import Like

logger = logging.getLogger(__name__)

class LikeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_like(self, user_id: str, post_id: int) -> Like:
        """Like a post; liking it again returns the existing like"""
        await insert_or_ignore(
            self.db,
            Like,
            values={"user_id": user_id, "post_id": post_id},
            index_elements=["user_id", "post_id"],
        )
        await self.db.commit()

        like = await self.get_like(user_id, post_id)

        logger.info(f"User {user_id} liked post {post_id}")

        return like

    async def delete_like(self, user_id: str, post_id: int) -> None:
        """Remove a like; a missing like is a no-op"""
        stmt = delete(Like).where(
            and_(Like.user_id == user_id, Like.post_id == post_id)
        )
        await self.db.execute(stmt)
        await self.db.commit()

        logger.info(f"User {user_id} unliked post {post_id}")

    async def get_like(self, user_id: str, post_id: int) -> Optional[Like]:
        stmt = select(Like).where(
            and_(Like.user_id == user_id, Like.post_id == post_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count_likes(self, post_id: int) -> int:
        stmt = select(func.count()).select_from(Like).where(Like.post_id == post_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0
