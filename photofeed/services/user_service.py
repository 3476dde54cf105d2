"""
User Service for handling user-related business logic
"""
import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, exists

from photofeed.db.base import utcnow
from photofeed.db.upsert import insert_or_update
from photofeed.models.user import User
from photofeed.models.post import Post
from photofeed.models.follow import Follow
from photofeed.schemas.user_schema import UserUpsert, UserPublic

logger = logging.getLogger(__name__)

SUGGESTED_USERS_LIMIT = 10

def followers_count_column():
    return (
        select(func.count())
        .select_from(Follow)
        .where(Follow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )

def is_following_column(viewer_id: str):
    return exists().where(
        and_(Follow.follower_id == viewer_id, Follow.following_id == User.id)
    ).correlate(User)

class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_username(
        self,
        username: str,
        current_user_id: Optional[str] = None
    ) -> Optional[UserPublic]:
        """Get a user by username, with follow state and counts when a viewer is given"""
        if current_user_id is None:
            stmt = select(User).where(User.username == username)
            result = await self.db.execute(stmt)
            user = result.scalar_one_or_none()
            return UserPublic.model_validate(user) if user else None

        posts_count = (
            select(func.count())
            .select_from(Post)
            .where(Post.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        following_count = (
            select(func.count())
            .select_from(Follow)
            .where(Follow.follower_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )

        stmt = select(
            User,
            is_following_column(current_user_id).label('is_following'),
            posts_count.label('posts_count'),
            followers_count_column().label('followers_count'),
            following_count.label('following_count'),
        ).where(User.username == username)

        result = await self.db.execute(stmt)
        row = result.first()

        if not row:
            return None

        profile = UserPublic.model_validate(row.User)
        profile.is_following = bool(row.is_following)
        profile.posts_count = row.posts_count or 0
        profile.followers_count = row.followers_count or 0
        profile.following_count = row.following_count or 0
        return profile

    async def upsert_user(self, user_data: UserUpsert) -> User:
        """Create the user, or refresh their profile fields if they already exist"""
        values = user_data.model_dump(exclude_unset=True)
        now = utcnow()

        await insert_or_update(
            self.db,
            User,
            values={**values, "created_at": now, "updated_at": now},
            index_elements=["id"],
            update_values={**values, "updated_at": now},
        )

        stmt = select(User).where(User.id == user_data.id).execution_options(
            populate_existing=True
        )
        result = await self.db.execute(stmt)
        user = result.scalar_one()

        logger.info(f"Upserted user {user.id} ({user.username})")
        return user

    async def is_username_taken(self, username: str, user_id: str) -> bool:
        """Check whether another user already holds this username"""
        stmt = select(User.id).where(
            and_(User.username == username, User.id != user_id)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def is_email_taken(self, email: str, user_id: str) -> bool:
        stmt = select(User.id).where(
            and_(User.email == email, User.id != user_id)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def get_following_ids(self, user_id: str) -> List[str]:
        """IDs of every user this user follows"""
        stmt = select(Follow.following_id).where(Follow.follower_id == user_id)
        result = await self.db.execute(stmt)
        return [row[0] for row in result]

    async def is_following(self, follower_id: str, following_id: str) -> bool:
        stmt = select(Follow.follower_id).where(
            and_(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id
            )
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def get_suggested_users(self, user_id: str) -> List[UserPublic]:
        """Users the viewer does not follow yet, excluding the viewer"""
        excluded_ids = await self.get_following_ids(user_id)
        excluded_ids.append(user_id)

        stmt = select(
            User,
            followers_count_column().label('followers_count'),
        ).where(
            User.id.not_in(excluded_ids)
        ).order_by(
            User.created_at.desc()
        ).limit(SUGGESTED_USERS_LIMIT)

        result = await self.db.execute(stmt)

        suggestions = []
        for row in result.all():
            user = UserPublic.model_validate(row.User)
            user.followers_count = row.followers_count or 0
            user.is_following = False
            suggestions.append(user)

        return suggestions
