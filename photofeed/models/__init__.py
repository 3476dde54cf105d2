"""
Models package for Photofeed
"""
from photofeed.db.base import Base, TimestampMixin
from photofeed.models.user import User
from photofeed.models.post import Post
from photofeed.models.comment import Comment
from photofeed.models.like import Like
from photofeed.models.save import Save
from photofeed.models.follow import Follow
from photofeed.models.session import Session

__all__ = [
    'Base',
    'TimestampMixin',
    'User',
    'Post',
    'Comment',
    'Like',
    'Save',
    'Follow',
    'Session',
]
