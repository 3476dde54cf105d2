from typing import List
from datetime import datetime

from photofeed.schemas.base_schema import CamelModel
from photofeed.schemas.user_schema import UserResponse, UserPublic
from photofeed.schemas.post_schema import PostResponse

class StoryResponse(CamelModel):
    id: str
    user: UserResponse
    image_url: str
    created_at: datetime
    expires_at: datetime
    has_viewed: bool = False

class HashtagTrending(CamelModel):
    id: str
    name: str
    posts_count: int
    preview_images: List[str] = []

class SearchResponse(CamelModel):
    users: List[UserPublic] = []
    posts: List[PostResponse] = []
    hashtags: List[HashtagTrending] = []
