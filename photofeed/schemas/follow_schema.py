from datetime import datetime

from photofeed.schemas.base_schema import CamelModel

class FollowResponse(CamelModel):
    follower_id: str
    following_id: str
    created_at: datetime
