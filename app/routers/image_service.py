from fastapi import APIRouter, Depends, UploadFile, File, Form, Response
from starlette.concurrency import run_in_threadpool
from typing import List, Optional
from io import BytesIO
import logging

from app.settings import Settings
from app.storage.dynamodb import DynamoDBService
from app.storage.s3 import S3Service
from app.dependencies.dependencies import get_s3_service, get_dynamodb_service, get_settings
from app.image_service.service import (
    validate_upload,
    check_size,
    sniff_content_type,
    save_image_and_meta,
    fetch_images,
)
from app.image_service.models import ImageRecord

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["image-gallery"]
)

@router.post("/upload", response_model=ImageRecord, status_code=201)
async def upload_image(
    response: Response,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: DynamoDBService = Depends(get_dynamodb_service),
    s3: S3Service = Depends(get_s3_service),
    settings: Settings = Depends(get_settings),
):
    """Uploads an image to S3 and records its metadata."""
    log.info("Upload request received: title=%r description=%r", title, description)
    response.headers["X-Content-Type-Options"] = "nosniff"

    validate_upload(title, description, image.filename if image else None)

    # Reject on the declared size before buffering the body
    if image.size is not None:
        check_size(image.size, settings.max_upload_bytes)

    contents = await image.read()
    content_type = sniff_content_type(contents, image.content_type)

    return await run_in_threadpool(
        save_image_and_meta,
        db=db,
        s3=s3,
        fileobj=BytesIO(contents),
        filename=image.filename,
        content_type=content_type,
        size=len(contents),
        title=title,
        description=description,
        key_prefix=settings.key_prefix,
        max_bytes=settings.max_upload_bytes,
    )

@router.get("/images", response_model=List[ImageRecord])
async def list_images_handler(
    db: DynamoDBService = Depends(get_dynamodb_service),
):
    """Lists every image record, most recent first."""
    return await run_in_threadpool(fetch_images, db)
