from typing import Any, Dict
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from uuid import uuid4

def new_image_id() -> str:
    """Generates a new unique image ID."""
    return str(uuid4())

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class ImageRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_image_id)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image_url: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utc_now)

    def to_item(self) -> Dict[str, Any]:
        """DynamoDB item for this record."""
        item = self.model_dump()
        # Dynamo needs created_at as ISO string
        item["created_at"] = self.created_at.isoformat()
        return item

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "ImageRecord":
        return cls(
            id=item["id"],
            title=item["title"],
            description=item["description"],
            image_url=item["image_url"],
            created_at=datetime.fromisoformat(item["created_at"]),
        )

class HealthResponse(BaseModel):
    message: str
    dynamodb: str
    s3: str
    timestamp: datetime
