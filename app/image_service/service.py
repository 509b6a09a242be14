from datetime import datetime, timezone
from typing import List, Optional
from io import BytesIO
import logging
import time
from PIL import Image, UnidentifiedImageError
from botocore.exceptions import BotoCoreError, ClientError

from app.storage.dynamodb import DynamoDBService
from app.storage.s3 import S3Service
from app.image_service.models import ImageRecord, HealthResponse
from app.exceptions import ValidationError, FileTooLargeError, PersistenceError

log = logging.getLogger(__name__)

def validate_upload(title: Optional[str], description: Optional[str], filename: Optional[str]):
    """Rejects incomplete submissions before any bytes leave the process."""
    if not title or not description:
        raise ValidationError("Title and description are required")
    if not filename:
        raise ValidationError("Image file is required")

def check_size(size: int, max_bytes: int):
    if size > max_bytes:
        raise FileTooLargeError(f"File too large: {size} bytes exceeds the {max_bytes} byte limit")

def object_key(prefix: str, filename: str) -> str:
    """Builds the object key from the upload time in milliseconds and the original filename."""
    return f"{prefix}{int(time.time() * 1000)}-{filename}"

def sniff_content_type(data: bytes, declared: Optional[str]) -> Optional[str]:
    """Detects the real image format, falling back to the declared MIME type."""
    if not declared or not declared.startswith("image/"):
        return declared
    try:
        with Image.open(BytesIO(data)) as img:
            detected = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return declared
    return detected or declared

def save_image_and_meta(
    db: DynamoDBService,
    s3: S3Service,
    fileobj,
    filename: str,
    content_type: Optional[str],
    size: int,
    title: str,
    description: str,
    key_prefix: str,
    max_bytes: int,
) -> ImageRecord:
    """Saves image to S3 and its metadata record to DynamoDB."""
    check_size(size, max_bytes)
    key = object_key(key_prefix, filename)

    # upload to s3
    image_url = s3.upload(fileobj=fileobj, key=key, content_type=content_type)
    log.info("File uploaded to S3: %s", image_url)

    record = ImageRecord(title=title, description=description, image_url=image_url)
    try:
        saved = db.insert(record)
    except PersistenceError:
        discard_orphan(s3, key)
        raise

    log.info("Image saved to database: %s", saved.id)
    return saved

def discard_orphan(s3: S3Service, key: str):
    """Best-effort removal of a blob whose metadata write failed."""
    try:
        s3.delete(key)
        log.warning("Removed orphaned object %s after metadata write failure", key)
    except (BotoCoreError, ClientError) as e:
        log.error("Failed to remove orphaned object %s: %s", key, e)

def fetch_images(db: DynamoDBService) -> List[ImageRecord]:
    """Fetches every image record, newest first."""
    return db.find_all_newest_first()

def health_status(db: DynamoDBService) -> HealthResponse:
    return HealthResponse(
        message="Server is running!",
        dynamodb="connected" if db.is_connected else "disconnected",
        s3="configured",
        timestamp=datetime.now(timezone.utc),
    )
