from typing import Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, desc, func, exists
from sqlalchemy.sql import Select
import logging

from photofeed.models.post import Post
from photofeed.models.user import User
from photofeed.models.like import Like
from photofeed.models.save import Save
from photofeed.models.comment import Comment
from photofeed.models.follow import Follow
from photofeed.schemas.user_schema import UserResponse
from photofeed.schemas.comment_schema import CommentResponse
from photofeed.schemas.post_schema import PostResponse

logger = logging.getLogger(__name__)

FEED_LIMIT = 20
TRENDING_LIMIT = 12
COMMENT_PREVIEW_LIMIT = 5

def likes_count_column():
    return (
        select(func.count())
        .select_from(Like)
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )

def comments_count_column():
    return (
        select(func.count())
        .select_from(Comment)
        .where(Comment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )

def comment_to_response(comment: Comment, user: User) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        user_id=comment.user_id,
        post_id=comment.post_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        user=UserResponse.model_validate(user),
    )

def post_to_response(post: Post, user: User, **extra) -> PostResponse:
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        caption=post.caption,
        image_url=post.image_url,
        location=post.location,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user=UserResponse.model_validate(user),
        **extra
    )

class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_post(
        self,
        user_id: str,
        caption: str,
        image_url: str,
        location: Optional[str] = None
    ) -> PostResponse:
        """Create a new post"""
        post = Post(
            user_id=user_id,
            caption=caption,
            image_url=image_url,
            location=location
        )

        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)

        user = await self.db.get(User, user_id)

        logger.info(f"User {user_id} created post {post.id}")

        return post_to_response(
            post,
            user,
            likes_count=0,
            comments_count=0,
            is_liked=False,
            is_saved=False,
        )

    async def post_exists(self, post_id: int) -> bool:
        stmt = select(Post.id).where(Post.id == post_id)
        result = await self.db.execute(stmt)
        return result.first() is not None

    def enriched_select(self, current_user_id: str) -> Select:
        """
        Post, owner, counts and viewer flags in a single statement.

        Callers add their own filters, ordering and limits; every column comes
        from the same statement so counts and flags agree with each other.
        """
        is_liked = exists().where(
            and_(Like.post_id == Post.id, Like.user_id == current_user_id)
        ).correlate(Post)
        is_saved = exists().where(
            and_(Save.post_id == Post.id, Save.user_id == current_user_id)
        ).correlate(Post)

        return select(
            Post,
            User,
            likes_count_column().label('likes_count'),
            comments_count_column().label('comments_count'),
            is_liked.label('is_liked'),
            is_saved.label('is_saved'),
        ).join(
            User, Post.user_id == User.id
        )

    async def get_comment_previews(
        self,
        post_ids: Sequence[int]
    ) -> Dict[int, List[CommentResponse]]:
        """Most recent comments per post, newest first, with their authors"""
        previews: Dict[int, List[CommentResponse]] = {post_id: [] for post_id in post_ids}
        if not post_ids:
            return previews

        rank = func.row_number().over(
            partition_by=Comment.post_id,
            order_by=(desc(Comment.created_at), desc(Comment.id))
        ).label('rank')
        ranked = select(Comment.id, rank).where(
            Comment.post_id.in_(post_ids)
        ).subquery()

        stmt = select(Comment, User).join(
            ranked, ranked.c.id == Comment.id
        ).join(
            User, Comment.user_id == User.id
        ).where(
            ranked.c.rank <= COMMENT_PREVIEW_LIMIT
        ).order_by(
            Comment.post_id, desc(Comment.created_at), desc(Comment.id)
        )

        result = await self.db.execute(stmt)
        for comment, user in result.all():
            previews[comment.post_id].append(comment_to_response(comment, user))

        return previews

    async def fetch_enriched(self, stmt: Select) -> List[PostResponse]:
        """Run an enriched select and attach comment previews, keeping row order"""
        result = await self.db.execute(stmt)
        rows = result.all()

        previews = await self.get_comment_previews([row.Post.id for row in rows])

        return [
            post_to_response(
                row.Post,
                row.User,
                likes_count=row.likes_count or 0,
                comments_count=row.comments_count or 0,
                is_liked=bool(row.is_liked),
                is_saved=bool(row.is_saved),
                comments=previews[row.Post.id],
            )
            for row in rows
        ]

    async def get_post(self, post_id: int, current_user_id: str) -> Optional[PostResponse]:
        """Get a post with its owner, counts, viewer flags and latest comments"""
        stmt = self.enriched_select(current_user_id).where(Post.id == post_id)
        posts = await self.fetch_enriched(stmt)
        return posts[0] if posts else None

    async def get_feed_posts(self, user_id: str) -> List[PostResponse]:
        """Newest posts by the user and everyone they follow"""
        following_stmt = select(Follow.following_id).where(
            Follow.follower_id == user_id
        )
        following_result = await self.db.execute(following_stmt)
        author_ids = [user_id] + [row[0] for row in following_result]

        stmt = self.enriched_select(user_id).where(
            Post.user_id.in_(author_ids)
        ).order_by(
            desc(Post.created_at), desc(Post.id)
        ).limit(FEED_LIMIT)

        return await self.fetch_enriched(stmt)

    async def get_user_posts(
        self,
        user_id: str,
        current_user_id: Optional[str] = None
    ) -> List[PostResponse]:
        """Every post by a user, newest first"""
        if current_user_id:
            stmt = self.enriched_select(current_user_id).where(
                Post.user_id == user_id
            ).order_by(
                desc(Post.created_at), desc(Post.id)
            )
            return await self.fetch_enriched(stmt)

        # Without a viewer there is nothing to enrich against
        stmt = select(Post, User).join(
            User, Post.user_id == User.id
        ).where(
            Post.user_id == user_id
        ).order_by(
            desc(Post.created_at), desc(Post.id)
        )
        result = await self.db.execute(stmt)

        return [
            post_to_response(
                post,
                user,
                likes_count=0,
                comments_count=0,
                is_liked=False,
                is_saved=False,
            )
            for post, user in result.all()
        ]

    async def get_saved_posts(self, user_id: str) -> List[PostResponse]:
        """Posts saved by the user, most recently saved first"""
        stmt = self.enriched_select(user_id).join(
            Save, and_(Save.post_id == Post.id, Save.user_id == user_id)
        ).order_by(
            desc(Save.created_at), desc(Post.id)
        )
        return await self.fetch_enriched(stmt)

    async def get_trending_posts(self, user_id: str) -> List[PostResponse]:
        """Most liked posts"""
        likes_count = likes_count_column()

        stmt = self.enriched_select(user_id).where(
            likes_count > 0
        ).order_by(
            desc(likes_count), desc(Post.created_at)
        ).limit(TRENDING_LIMIT)

        return await self.fetch_enriched(stmt)

    async def search_posts(
        self,
        query: str,
        current_user_id: str,
        limit: int = 9
    ) -> List[PostResponse]:
        """Posts whose caption or location contains the query"""
        pattern = f"%{query}%"
        stmt = self.enriched_select(current_user_id).where(
            or_(
                Post.caption.ilike(pattern),
                Post.location.ilike(pattern)
            )
        ).order_by(
            desc(Post.created_at)
        ).limit(limit)

        return await self.fetch_enriched(stmt)
