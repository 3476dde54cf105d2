from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from photofeed.config import settings
from photofeed.schemas.base_schema import CamelModel
from photofeed.schemas.user_schema import UserResponse
from photofeed.schemas.comment_schema import CommentResponse

class PostCreate(BaseModel):
    caption: str = Field(..., min_length=1, max_length=settings.CAPTION_MAX_LENGTH)
    location: Optional[str] = Field(None, max_length=settings.LOCATION_MAX_LENGTH)

class PostResponse(CamelModel):
    id: int
    user_id: str
    caption: str
    image_url: str
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: UserResponse
    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False
    is_saved: bool = False
    # Up to five most recent comments; absent on freshly created posts
    comments: Optional[List[CommentResponse]] = None
