import os
import io
import pytest
from moto import mock_aws
from fastapi.testclient import TestClient
from PIL import Image
import boto3

# Dummy AWS credentials for moto
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_REGION"] = "us-east-1"
# Clear endpoints so moto mocks are used instead of localstack
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.pop("DYNAMODB_URI", None)
for name in ("S3_ACCESS_KEY", "S3_SECRET_KEY", "S3_BUCKET_LOC", "S3_BUCKET_NAME", "S3_PUBLIC_URL"):
    os.environ.pop(name, None)

from app.main import create_app
from app.settings import Settings
from app.storage.s3 import S3Service
from app.storage.dynamodb import DynamoDBService

BUCKET = "image-gallery-bucket"
TABLE = "Images"
URL_PREFIX = f"https://{BUCKET}.s3.us-east-1.amazonaws.com/images/"


def make_image_bytes(fmt="JPEG", size=(32, 32), color="red"):
    """Generate a small valid image in-memory."""
    img = Image.new("RGB", size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def settings():
    return Settings(
        aws_region="us-east-1",
        s3_bucket=BUCKET,
        dynamodb_table=TABLE,
        aws_endpoint_url=None,
        public_url_base=None,
        dynamodb_uri=None,
    )


@pytest.fixture
def aws():
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=BUCKET)
        yield s3


@pytest.fixture
def s3_service(aws, settings):
    return S3Service(settings)


@pytest.fixture
def db_service(aws, settings):
    db = DynamoDBService(settings)
    db.connect()
    return db


@pytest.fixture
def test_client(settings, s3_service, db_service):
    app = create_app(settings, s3=s3_service, db=db_service)
    with TestClient(app) as client:
        yield client
