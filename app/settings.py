from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from typing import Dict, List, Optional

class Settings(BaseSettings):
    aws_region: str = Field("us-east-1", validation_alias=AliasChoices("S3_BUCKET_LOC", "AWS_REGION"))
    aws_access_key_id: Optional[str] = Field(None, validation_alias=AliasChoices("S3_ACCESS_KEY", "AWS_ACCESS_KEY_ID"))
    aws_secret_access_key: Optional[str] = Field(None, validation_alias=AliasChoices("S3_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"))
    s3_bucket: str = Field("image-gallery-bucket", validation_alias=AliasChoices("S3_BUCKET_NAME", "S3_BUCKET"))
    aws_endpoint_url: Optional[str] = Field(None, validation_alias="AWS_ENDPOINT_URL")
    # Base used to build object URLs, e.g. a CDN in front of the bucket
    public_url_base: Optional[str] = Field(None, validation_alias="S3_PUBLIC_URL")
    key_prefix: str = Field("images/", validation_alias="S3_KEY_PREFIX")

    dynamodb_uri: Optional[str] = Field(None, validation_alias="DYNAMODB_URI")
    dynamodb_table: str = Field("Images", validation_alias="DYNAMODB_TABLE")

    max_upload_bytes: int = Field(10 * 1024 * 1024, validation_alias="MAX_UPLOAD_BYTES")
    cors_origins: str = Field("http://localhost:5173", validation_alias="CORS_ORIGINS")
    port: int = Field(5000, validation_alias="PORT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    app_title: str = Field("Image Gallery Service", validation_alias="APP_TITLE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def env_report(self) -> Dict[str, bool]:
        """Which of the required connection values are present, keyed by env name."""
        return {
            "S3_ACCESS_KEY": bool(self.aws_access_key_id),
            "S3_SECRET_KEY": bool(self.aws_secret_access_key),
            "S3_BUCKET_LOC": bool(self.aws_region),
            "S3_BUCKET_NAME": bool(self.s3_bucket),
            "DYNAMODB_URI": bool(self.dynamodb_uri),
        }

    def missing_env(self) -> List[str]:
        return [name for name, present in self.env_report().items() if not present]

def get_settings() -> Settings:
    return Settings()
