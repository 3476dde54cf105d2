"""
Image upload helpers.

Uploaded images are not written anywhere; they are kept on the post row as
a base64 data URI.
"""
import base64
import logging
from typing import Optional
from fastapi import UploadFile

from photofeed.config import settings

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class UploadTooLarge(ValueError):
    """Raised when an upload exceeds MAX_UPLOAD_SIZE"""


def to_data_uri(content: bytes, mime_type: Optional[str]) -> str:
    """Encode raw bytes as a data URI"""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


async def read_upload_as_data_uri(
    upload_file: UploadFile,
    max_size: int = settings.MAX_UPLOAD_SIZE
) -> str:
    """
    Read an uploaded file into memory and return it as a data URI

    Raises:
        UploadTooLarge: if the file is bigger than max_size bytes
    """
    # Read one byte past the limit so oversize files are detected without
    # pulling the whole body into memory
    content = await upload_file.read(max_size + 1)
    if len(content) > max_size:
        logger.info(f"Rejected upload {upload_file.filename}: larger than {max_size} bytes")
        raise UploadTooLarge(f"Image must be at most {max_size // (1024 * 1024)}MB")

    return to_data_uri(content, upload_file.content_type)
