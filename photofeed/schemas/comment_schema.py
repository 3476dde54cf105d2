from pydantic import BaseModel, Field
from datetime import datetime

from photofeed.config import settings
from photofeed.schemas.base_schema import CamelModel
from photofeed.schemas.user_schema import UserResponse

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=settings.COMMENT_MAX_LENGTH)

class CommentResponse(CamelModel):
    id: int
    user_id: str
    post_id: int
    content: str
    created_at: datetime
    updated_at: datetime
    user: UserResponse
