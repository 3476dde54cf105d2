from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_
import logging

from photofeed.db.upsert import insert_or_ignore
from photofeed.models.save import Save

logger = logging.getLogger(__name__)

class SaveService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_post(self, user_id: str, post_id: int) -> Save:
        """Save a post; saving it again returns the existing save"""
        await insert_or_ignore(
            self.db,
            Save,
            values={"user_id": user_id, "post_id": post_id},
            index_elements=["user_id", "post_id"],
        )
        await self.db.commit()

        save = await self.get_save(user_id, post_id)

        logger.info(f"User {user_id} saved post {post_id}")

        return save

    async def unsave_post(self, user_id: str, post_id: int) -> None:
        """Remove a save; a missing save is a no-op"""
        stmt = delete(Save).where(
            and_(Save.user_id == user_id, Save.post_id == post_id)
        )
        await self.db.execute(stmt)
        await self.db.commit()

        logger.info(f"User {user_id} unsaved post {post_id}")

    async def get_save(self, user_id: str, post_id: int) -> Optional[Save]:
        stmt = select(Save).where(
            and_(Save.user_id == user_id, Save.post_id == post_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
