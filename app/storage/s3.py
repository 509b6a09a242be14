import boto3
from typing import Optional, Set
from urllib.parse import quote
from botocore.exceptions import BotoCoreError, ClientError
from app.settings import Settings
from app.exceptions import ConnectivityError, UploadError, ValidationError
import logging

log = logging.getLogger(__name__)

# -------------------------
# S3 Service
# -------------------------
class S3Service:
    def __init__(self, settings: Settings):
        self.bucket = settings.s3_bucket
        self.region = settings.aws_region
        self.endpoint_url = settings.aws_endpoint_url
        self.public_url_base = settings.public_url_base

        session = boto3.session.Session(region_name=settings.aws_region)
        kwargs = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
        }
        if settings.aws_endpoint_url:
            kwargs["endpoint_url"] = settings.aws_endpoint_url

        self.client = session.client("s3", **kwargs)
        log.info("Initialized S3 client for bucket %s", self.bucket)

    def list_buckets(self) -> Set[str]:
        """Startup diagnostic: logs the visible buckets and whether ours is among them."""
        try:
            resp = self.client.list_buckets()
        except (BotoCoreError, ClientError) as e:
            raise ConnectivityError(f"S3 connection failed: {e}")

        buckets = resp.get("Buckets", [])
        log.info("S3 connection successful, %d bucket(s) available", len(buckets))
        for bucket in buckets:
            log.info("  - %s (created: %s)", bucket["Name"], bucket.get("CreationDate"))

        names = {bucket["Name"] for bucket in buckets}
        if self.bucket in names:
            log.info("Target bucket %s exists", self.bucket)
        else:
            log.warning("Target bucket %s not found", self.bucket)
        return names

    def object_url(self, key: str) -> str:
        quoted = quote(key, safe="/")
        if self.public_url_base:
            return f"{self.public_url_base.rstrip('/')}/{quoted}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"

    def upload(self, fileobj, key: str, content_type: Optional[str]) -> str:
        """Streams fileobj to the bucket under key and returns its URL."""
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Only image files are allowed")
        try:
            self.client.upload_fileobj(
                Fileobj=fileobj,
                Bucket=self.bucket,
                Key=key,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as e:
            log.error("S3 upload failed: %s", e)
            raise UploadError(f"Failed to upload image: {e}")
        log.debug("Uploaded %s to s3://%s/%s", key, self.bucket, key)
        return self.object_url(key)

    def delete(self, key: str):
        self.client.delete_object(Bucket=self.bucket, Key=key)
        log.debug("Deleted s3://%s/%s", self.bucket, key)

    def close(self):
        self.client.close()
        log.info("Closed S3 client")
