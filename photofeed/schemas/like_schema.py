from datetime import datetime

from photofeed.schemas.base_schema import CamelModel

class LikeResponse(CamelModel):
    user_id: str
    post_id: int
    created_at: datetime

class SaveResponse(CamelModel):
    user_id: str
    post_id: int
    created_at: datetime
