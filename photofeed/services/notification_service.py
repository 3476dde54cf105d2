"""
Notifications are assembled on every request from the like, follow and
comment tables; nothing is stored, so every entry is unread.
"""
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
import logging

from photofeed.models.user import User
from photofeed.models.post import Post
from photofeed.models.like import Like
from photofeed.models.comment import Comment
from photofeed.models.follow import Follow
from photofeed.schemas.notification_schema import (
    NotificationActor,
    NotificationResponse,
    NotificationType
)
from photofeed.services.user_service import UserService

logger = logging.getLogger(__name__)

LIKED_POSTS_SCANNED = 3
LIKERS_PER_POST = 2
RECENT_FOLLOWERS = 3
COMMENTED_POSTS_SCANNED = 2
COMMENTERS_PER_POST = 2
COMMENT_EXCERPT_LENGTH = 20

def comment_excerpt(content: str) -> str:
    excerpt = content[:COMMENT_EXCERPT_LENGTH]
    if len(content) > COMMENT_EXCERPT_LENGTH:
        excerpt += "..."
    return excerpt

class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

        # Notification templates
        self.templates = {
            NotificationType.LIKE: "liked your photo.",
            NotificationType.FOLLOW: "started following you.",
            NotificationType.COMMENT: 'commented on your post: "{excerpt}"',
        }

    async def _actor(self, viewer_id: str, actor: User) -> NotificationActor:
        notification_actor = NotificationActor.model_validate(actor)
        notification_actor.is_following = await self.user_service.is_following(
            viewer_id, actor.id
        )
        return notification_actor

    async def _recent_posts(self, user_id: str, limit: int) -> List[Post]:
        stmt = select(Post).where(
            Post.user_id == user_id
        ).order_by(
            desc(Post.created_at), desc(Post.id)
        ).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _like_notifications(self, user_id: str) -> List[NotificationResponse]:
        notifications = []

        for post in await self._recent_posts(user_id, LIKED_POSTS_SCANNED):
            stmt = select(Like, User).join(
                User, Like.user_id == User.id
            ).where(
                Like.post_id == post.id
            ).order_by(
                desc(Like.created_at)
            ).limit(LIKERS_PER_POST)
            result = await self.db.execute(stmt)

            for like, actor in result.all():
                if actor.id == user_id:
                    continue
                notifications.append(NotificationResponse(
                    id=f"like-{post.id}-{actor.id}",
                    type=NotificationType.LIKE,
                    message=self.templates[NotificationType.LIKE],
                    actor=await self._actor(user_id, actor),
                    post_id=post.id,
                    post_image_url=post.image_url,
                    is_read=False,
                    created_at=like.created_at,
                ))

        return notifications

    async def _follow_notifications(self, user_id: str) -> List[NotificationResponse]:
        notifications = []

        stmt = select(Follow, User).join(
            User, Follow.follower_id == User.id
        ).where(
            Follow.following_id == user_id
        ).order_by(
            desc(Follow.created_at)
        ).limit(RECENT_FOLLOWERS)
        result = await self.db.execute(stmt)

        for follow, actor in result.all():
            if actor.id == user_id:
                continue
            notifications.append(NotificationResponse(
                id=f"follow-{actor.id}",
                type=NotificationType.FOLLOW,
                message=self.templates[NotificationType.FOLLOW],
                actor=await self._actor(user_id, actor),
                is_read=False,
                created_at=follow.created_at,
            ))

        return notifications

    async def _comment_notifications(self, user_id: str) -> List[NotificationResponse]:
        notifications = []

        for post in await self._recent_posts(user_id, COMMENTED_POSTS_SCANNED):
            stmt = select(Comment, User).join(
                User, Comment.user_id == User.id
            ).where(
                Comment.post_id == post.id
            ).order_by(
                desc(Comment.created_at), desc(Comment.id)
            ).limit(COMMENTERS_PER_POST)
            result = await self.db.execute(stmt)

            for comment, actor in result.all():
                if actor.id == user_id:
                    continue
                message = self.templates[NotificationType.COMMENT].format(
                    excerpt=comment_excerpt(comment.content)
                )
                notifications.append(NotificationResponse(
                    id=f"comment-{comment.id}",
                    type=NotificationType.COMMENT,
                    message=message,
                    actor=await self._actor(user_id, actor),
                    post_id=post.id,
                    post_image_url=post.image_url,
                    is_read=False,
                    created_at=comment.created_at,
                ))

        return notifications

    async def get_notifications(self, user_id: str) -> List[NotificationResponse]:
        """Recent likes, follows and comments aimed at the user, newest first"""
        notifications = [
            *await self._like_notifications(user_id),
            *await self._follow_notifications(user_id),
            *await self._comment_notifications(user_id),
        ]
        notifications.sort(key=lambda n: n.created_at, reverse=True)
        return notifications
