from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
import logging

from photofeed.models.user import User
from photofeed.schemas.user_schema import UserPublic
from photofeed.schemas.explore_schema import SearchResponse
from photofeed.services.user_service import followers_count_column, is_following_column
from photofeed.services.post_service import PostService
from photofeed.services.explore_service import ExploreService

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
USER_RESULTS_LIMIT = 5
POST_RESULTS_LIMIT = 9

class SearchService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.post_service = PostService(db)
        self.explore_service = ExploreService()

    async def search(self, query: str, user_id: str) -> SearchResponse:
        """Search users, posts and hashtags"""
        if not query or len(query) < MIN_QUERY_LENGTH:
            return SearchResponse(users=[], posts=[], hashtags=[])

        pattern = f"%{query}%"
        stmt = select(
            User,
            is_following_column(user_id).label('is_following'),
            followers_count_column().label('followers_count'),
        ).where(
            or_(
                User.username.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern)
            )
        ).order_by(
            User.username
        ).limit(USER_RESULTS_LIMIT)
        result = await self.db.execute(stmt)

        users = []
        for row in result.all():
            user = UserPublic.model_validate(row.User)
            user.is_following = bool(row.is_following)
            user.followers_count = row.followers_count or 0
            users.append(user)

        posts = await self.post_service.search_posts(
            query, user_id, limit=POST_RESULTS_LIMIT
        )
        hashtags = self.explore_service.search_hashtags(query)

        logger.debug(
            f"Search '{query}': {len(users)} users, {len(posts)} posts, {len(hashtags)} hashtags"
        )

        return SearchResponse(users=users, posts=posts, hashtags=hashtags)
