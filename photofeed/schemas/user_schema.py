from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

from photofeed.schemas.base_schema import CamelModel

class UserUpsert(BaseModel):
    """Fields taken from the identity provider's claims on login"""
    id: str
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

class UserResponse(CamelModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class UserPublic(UserResponse):
    # Viewer-relative state, only filled in when a viewer is known
    is_following: Optional[bool] = None
    posts_count: Optional[int] = None
    followers_count: Optional[int] = None
    following_count: Optional[int] = None
