from fastapi import APIRouter, Depends, HTTPException, Request, status, UploadFile, File, Form
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from photofeed.config import settings
from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.post_schema import PostCreate, PostResponse
from photofeed.services.auth_service import get_current_user
from photofeed.services.post_service import PostService
from photofeed.utils.file_upload import UploadTooLarge, read_upload_as_data_uri
from photofeed.utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()

def validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )

@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def create_post(
    request: Request,
    image: Optional[UploadFile] = File(None),
    caption: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a new post from a multipart upload"""
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image is required"
        )

    try:
        post_data = PostCreate(caption=caption, location=location)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=validation_message(e)
        )

    try:
        image_url = await read_upload_as_data_uri(image)
    except UploadTooLarge as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    try:
        post_service = PostService(db)
        return await post_service.create_post(
            user_id=current_user.id,
            caption=post_data.caption,
            image_url=image_url,
            location=post_data.location
        )
    except Exception as e:
        logger.error(f"Create post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get a post by ID"""
    try:
        post = await PostService(db).get_post(post_id, current_user.id)

        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )

        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get post error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch post"
        )
