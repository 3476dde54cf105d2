from typing import Optional
from datetime import datetime
from enum import Enum

from photofeed.schemas.base_schema import CamelModel
from photofeed.schemas.user_schema import UserResponse

class NotificationType(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"

class NotificationActor(UserResponse):
    is_following: bool = False

class NotificationResponse(CamelModel):
    id: str
    type: NotificationType
    message: str
    actor: NotificationActor
    post_id: Optional[int] = None
    post_image_url: Optional[str] = None
    is_read: bool = False
    created_at: datetime
