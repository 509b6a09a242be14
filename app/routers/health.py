from fastapi import APIRouter, Depends

from app.storage.dynamodb import DynamoDBService
from app.dependencies.dependencies import get_dynamodb_service
from app.image_service.service import health_status
from app.image_service.models import HealthResponse

router = APIRouter(
    prefix="/api",
    tags=["health"]
)

@router.get("/health", response_model=HealthResponse)
def health_check(db: DynamoDBService = Depends(get_dynamodb_service)):
    """Reports liveness plus the current DynamoDB connection state without a round-trip."""
    return health_status(db)
