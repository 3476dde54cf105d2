from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from photofeed.models.comment import Comment
from photofeed.models.user import User
from photofeed.schemas.comment_schema import CommentResponse
from photofeed.services.post_service import comment_to_response

logger = logging.getLogger(__name__)

class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_comment(self, user_id: str, post_id: int, content: str) -> CommentResponse:
        """Add a comment to a post"""
        comment = Comment(
            user_id=user_id,
            post_id=post_id,
            content=content
        )

        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        user = await self.db.get(User, user_id)

        logger.info(f"User {user_id} commented on post {post_id}")

        return comment_to_response(comment, user)

    async def count_comments(self, post_id: int) -> int:
        stmt = select(func.count()).select_from(Comment).where(Comment.post_id == post_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0
