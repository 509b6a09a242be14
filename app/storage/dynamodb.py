import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from typing import Any, Dict, List, Optional
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError
from app.settings import Settings
from app.exceptions import ConnectivityError, PersistenceError
from app.image_service.models import ImageRecord, new_image_id
import logging

log = logging.getLogger(__name__)

# -------------------------
# DynamoDB Service
# -------------------------
class DynamoDBService:
    def __init__(self, settings: Settings):
        self.table_name = settings.dynamodb_table
        self._session = boto3.session.Session(region_name=settings.aws_region)
        self._credentials = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
        }
        self.resource = None
        self.table = None
        # Low-level client for request-time calls; resources are not thread-safe
        self.client = None
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self, uri: Optional[str] = None):
        """Opens the table at uri (default AWS endpoint when unset), creating it if missing."""
        kwargs = dict(self._credentials)
        if uri:
            kwargs["endpoint_url"] = uri
        try:
            self.resource = self._session.resource("dynamodb", **kwargs)
            self.table = self.ensure_table()
            self.client = self.resource.meta.client
        except (BotoCoreError, ClientError) as e:
            self._connected = False
            raise ConnectivityError(f"DynamoDB connection failed: {e}")
        self._connected = True
        log.info("Connected to DynamoDB table %s", self.table_name)

    # Refer here: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/client/create_table.html
    def ensure_table(self):
        table = self.resource.Table(self.table_name)
        try:
            table.load()
            return table
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise
        table = self.resource.create_table(
            TableName=self.table_name,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        table.wait_until_exists()
        log.info("Created table %s", self.table_name)
        return table

    def _require_client(self):
        if self.client is None:
            raise PersistenceError("Database is not connected")
        return self.client

    def _serialize(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {k: self._serializer.serialize(v) for k, v in item.items()}

    def _deserialize(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {k: self._deserializer.deserialize(v) for k, v in item.items()}

    def _failed(self, action: str, e: Exception) -> PersistenceError:
        if isinstance(e, EndpointConnectionError):
            self._connected = False
        log.error("DynamoDB %s failed: %s", action, e)
        return PersistenceError(f"Failed to {action}: {e}")

    def insert(self, record: ImageRecord) -> ImageRecord:
        client = self._require_client()
        record = record.model_copy(update={"id": new_image_id()})
        try:
            client.put_item(TableName=self.table_name, Item=self._serialize(record.to_item()))
        except (BotoCoreError, ClientError) as e:
            raise self._failed("save image metadata", e)
        self._connected = True
        log.debug("Inserted metadata %s", record.id)
        return record

    def find_all_newest_first(self) -> List[ImageRecord]:
        client = self._require_client()
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {"TableName": self.table_name}
        try:
            while True:
                resp = client.scan(**scan_kwargs)
                items.extend(self._deserialize(item) for item in resp.get("Items", []))
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as e:
            raise self._failed("fetch images", e)
        self._connected = True

        records = [ImageRecord.from_item(item) for item in items]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def close(self):
        if self.resource is not None:
            self.resource.meta.client.close()
        self._connected = False
        log.info("Closed DynamoDB resource")
