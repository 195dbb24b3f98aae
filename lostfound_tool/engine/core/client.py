"""
DynamoDB store wrapper with error handling.

All access goes through the low-level client, which boto3 documents as
thread-safe, so one store instance can be shared by the fanout workers.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from decimal import Decimal
from typing import Any, Iterator

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from ..constants import (
    ATTR_CREATED_AT,
    ATTR_DEVICE_TOKENS,
    ATTR_MATCH_KEY,
    ATTR_PK,
    ATTR_RECORD_TYPE,
    ATTR_SK,
    ATTR_UPDATED_AT,
    GSI_MATCH,
    PREFIX_ITEM,
    PREFIX_MATCH,
    PREFIX_RESOLUTION,
    PREFIX_USER,
    TRANSACTION_MAX_ITEMS,
)
from ..exceptions import (
    ConditionFailedError,
    StoreError,
    StorePermissionError,
    StoreThrottlingError,
    TableNotFoundError,
    TransactionConflictError,
)
from ..models import Item, ItemType, MatchRecord, ResolutionRecord, ResolutionType, User
from ..utils import format_key, pair_key

_THROTTLING_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
}


def match_key(item_type: ItemType, category: str) -> str:
    """GSI partition value grouping items by type and category."""
    return f"{item_type.value}#{category}"


class DynamoDBStore:
    """Single-table DynamoDB store for items, users, matches and resolutions."""

    def __init__(
        self,
        table_name: str,
        region: str | None = None,
        profile: str | None = None,
        session: boto3.Session | None = None,
    ):
        """
        Initialize DynamoDB store.

        Args:
            table_name: DynamoDB table name
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            session: Pre-built boto3 session (optional, overrides region/profile)
        """
        session = session or boto3.Session(profile_name=profile, region_name=region)
        self.client = session.client("dynamodb")
        self.table_name = table_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    # -- items -------------------------------------------------------------

    def get_item(self, item_id: str) -> Item | None:
        """
        Get an item by id.

        Returns:
            Item if found, None otherwise

        Raises:
            StoreError: For DynamoDB errors
        """
        raw = self._get(format_key(PREFIX_ITEM, item_id))
        return record_to_item(raw) if raw else None

    def put_item(self, item: Item) -> None:
        """
        Create an item; fails if the id is already taken.

        Raises:
            ConditionFailedError: If an item with this id exists
            StoreError: For other DynamoDB errors
        """
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item=self._serialize(_item_to_record(item)),
                ConditionExpression="attribute_not_exists(PK)",
            )
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def query_open_items(self, item_type: ItemType, category: str) -> list[Item]:
        """
        List unresolved items of one type and category, oldest first.

        Raises:
            StoreError: For DynamoDB errors
        """
        kwargs: dict[str, Any] = {
            "TableName": self.table_name,
            "IndexName": GSI_MATCH,
            "KeyConditionExpression": "#mk = :mk",
            "FilterExpression": "is_resolved = :false",
            "ExpressionAttributeNames": {"#mk": ATTR_MATCH_KEY},
            "ExpressionAttributeValues": {
                ":mk": {"S": match_key(item_type, category)},
                ":false": {"BOOL": False},
            },
        }
        return [record_to_item(raw) for raw in self._paginate("query", kwargs)]

    def query_stale_items(self, cutoff: int) -> list[Item]:
        """
        List unresolved items created strictly before the cutoff.

        Args:
            cutoff: Epoch seconds

        Raises:
            StoreError: For DynamoDB errors
        """
        kwargs: dict[str, Any] = {
            "TableName": self.table_name,
            "FilterExpression": "#rt = :item AND is_resolved = :false AND created_at < :cutoff",
            "ExpressionAttributeNames": {"#rt": ATTR_RECORD_TYPE},
            "ExpressionAttributeValues": {
                ":item": {"S": PREFIX_ITEM},
                ":false": {"BOOL": False},
                ":cutoff": {"N": str(cutoff)},
            },
        }
        return [record_to_item(raw) for raw in self._paginate("scan", kwargs)]

    def count_items(
        self,
        item_type: ItemType | None = None,
        is_resolved: bool | None = None,
        owner_id: str | None = None,
    ) -> int:
        """
        Count items matching all given filters.

        Raises:
            StoreError: For DynamoDB errors
        """
        clauses = ["#rt = :item"]
        values: dict[str, Any] = {":item": {"S": PREFIX_ITEM}}
        if item_type is not None:
            clauses.append("item_type = :type")
            values[":type"] = {"S": item_type.value}
        if is_resolved is not None:
            clauses.append("is_resolved = :resolved")
            values[":resolved"] = {"BOOL": is_resolved}
        if owner_id is not None:
            clauses.append("owner_id = :owner")
            values[":owner"] = {"S": owner_id}

        kwargs: dict[str, Any] = {
            "TableName": self.table_name,
            "Select": "COUNT",
            "FilterExpression": " AND ".join(clauses),
            "ExpressionAttributeNames": {"#rt": ATTR_RECORD_TYPE},
            "ExpressionAttributeValues": values,
        }
        total = 0
        for page in self._pages("scan", kwargs):
            total += int(page.get("Count", 0))
        return total

    # -- users -------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        """
        Get a user's registered device tokens.

        Raises:
            StoreError: For DynamoDB errors
        """
        raw = self._get(format_key(PREFIX_USER, user_id))
        if not raw:
            return None
        return User(id=user_id, device_tokens=set(raw.get(ATTR_DEVICE_TOKENS, set())))

    def add_device_token(self, user_id: str, token: str, now: int) -> None:
        """
        Add a token to the user's token set, creating the user if needed.

        Raises:
            StoreError: For DynamoDB errors
        """
        key = format_key(PREFIX_USER, user_id)
        try:
            self.client.update_item(
                TableName=self.table_name,
                Key=self._serialize({ATTR_PK: key, ATTR_SK: key}),
                UpdateExpression=(
                    "ADD #tokens :tokens "
                    "SET #rt = :rt, updated_at = :ts, created_at = if_not_exists(created_at, :ts)"
                ),
                ExpressionAttributeNames={"#tokens": ATTR_DEVICE_TOKENS, "#rt": ATTR_RECORD_TYPE},
                ExpressionAttributeValues={
                    ":tokens": {"SS": [token]},
                    ":rt": {"S": PREFIX_USER},
                    ":ts": {"N": str(now)},
                },
            )
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    # -- matches -----------------------------------------------------------

    def put_match_record(self, record: MatchRecord) -> bool:
        """
        Insert a match record keyed by the unordered item pair.

        Returns:
            True if written, False if the pair was already recorded

        Raises:
            StoreError: For DynamoDB errors
        """
        key = pair_key(PREFIX_MATCH, record.source_item_id, record.candidate_item_id)
        data = {
            ATTR_PK: key,
            ATTR_SK: key,
            ATTR_RECORD_TYPE: PREFIX_MATCH,
            "source_item_id": record.source_item_id,
            "candidate_item_id": record.candidate_item_id,
            "notified": record.notified,
            ATTR_CREATED_AT: record.created_at,
        }
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item=self._serialize(data),
                ConditionExpression="attribute_not_exists(PK)",
            )
            return True
        except ClientError as e:
            try:
                self._handle_error(e)
            except ConditionFailedError:
                return False
            raise  # For type checker

    # -- resolution --------------------------------------------------------

    def resolve_item(
        self,
        item_id: str,
        owner_id: str,
        resolution_type: ResolutionType,
        linked_match_id: str | None,
        now: int,
    ) -> None:
        """
        Resolve a single item if it is still open and owned by owner_id.

        Raises:
            ConditionFailedError: If the item is resolved or not owned by owner_id
            StoreError: For other DynamoDB errors
        """
        try:
            self.client.update_item(**self._resolve_update(
                item_id, resolution_type, linked_match_id, now, owner_id=owner_id
            ))
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def resolve_pair(
        self,
        item_id: str,
        owner_id: str,
        resolution_type: ResolutionType,
        match_id: str,
        record: ResolutionRecord,
        now: int,
    ) -> None:
        """
        Atomically resolve an item, its counterpart, and write the resolution record.

        Both items must still be open and the primary item must be owned by
        owner_id, otherwise nothing is written.

        Raises:
            ConditionFailedError: If either compare-and-swap guard fails
            TransactionConflictError: If the transaction was cancelled for another reason
            StoreError: For other DynamoDB errors
        """
        key = pair_key(PREFIX_RESOLUTION, item_id, match_id)
        record_data = {
            ATTR_PK: key,
            ATTR_SK: key,
            ATTR_RECORD_TYPE: PREFIX_RESOLUTION,
            "item_id": record.item_id,
            "matched_item_id": record.matched_item_id,
            "resolution_type": record.resolution_type.value,
            "resolved_by": record.resolved_by,
            ATTR_CREATED_AT: record.created_at,
        }
        transact_items = [
            {"Update": self._resolve_update(
                item_id, resolution_type, match_id, now, owner_id=owner_id
            )},
            {"Update": self._resolve_update(match_id, ResolutionType.MATCHED, item_id, now)},
            {
                "Put": {
                    "TableName": self.table_name,
                    "Item": self._serialize(record_data),
                    "ConditionExpression": "attribute_not_exists(PK)",
                }
            },
        ]
        self._transact(transact_items)

    def expire_items(self, item_ids: list[str], now: int) -> None:
        """
        Atomically mark up to TRANSACTION_MAX_ITEMS open items as expired.

        Raises:
            ConditionFailedError: If any item was resolved concurrently
            StoreError: For other DynamoDB errors or an oversized batch
        """
        if not item_ids:
            return
        if len(item_ids) > TRANSACTION_MAX_ITEMS:
            raise StoreError(f"Batch cannot exceed {TRANSACTION_MAX_ITEMS} items")

        transact_items = []
        for item_id in item_ids:
            key = format_key(PREFIX_ITEM, item_id)
            transact_items.append(
                {
                    "Update": {
                        "TableName": self.table_name,
                        "Key": self._serialize({ATTR_PK: key, ATTR_SK: key}),
                        "UpdateExpression": (
                            "SET is_resolved = :true, resolution_type = :rtype, updated_at = :ts"
                        ),
                        "ConditionExpression": "attribute_exists(PK) AND is_resolved = :false",
                        "ExpressionAttributeValues": {
                            ":true": {"BOOL": True},
                            ":false": {"BOOL": False},
                            ":rtype": {"S": ResolutionType.EXPIRED.value},
                            ":ts": {"N": str(now)},
                        },
                    }
                }
            )
        self._transact(transact_items)

    # -- internals ---------------------------------------------------------

    def _resolve_update(
        self,
        item_id: str,
        resolution_type: ResolutionType,
        linked_match_id: str | None,
        now: int,
        owner_id: str | None = None,
    ) -> dict[str, Any]:
        key = format_key(PREFIX_ITEM, item_id)
        condition = "attribute_exists(PK) AND is_resolved = :false"
        values: dict[str, Any] = {
            ":true": {"BOOL": True},
            ":false": {"BOOL": False},
            ":rtype": {"S": resolution_type.value},
            ":link": self._serializer.serialize(linked_match_id),
            ":ts": {"N": str(now)},
        }
        if owner_id is not None:
            condition += " AND owner_id = :owner"
            values[":owner"] = {"S": owner_id}
        return {
            "TableName": self.table_name,
            "Key": self._serialize({ATTR_PK: key, ATTR_SK: key}),
            "UpdateExpression": (
                "SET is_resolved = :true, resolution_type = :rtype, "
                "linked_match_id = :link, resolved_at = :ts, updated_at = :ts"
            ),
            "ConditionExpression": condition,
            "ExpressionAttributeValues": values,
        }

    def _get(self, key: str) -> dict[str, Any] | None:
        try:
            response = self.client.get_item(
                TableName=self.table_name,
                Key=self._serialize({ATTR_PK: key, ATTR_SK: key}),
                ConsistentRead=True,
            )
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker
        raw = response.get("Item")
        return self._deserialize(raw) if raw else None

    def _transact(self, transact_items: list[dict[str, Any]]) -> None:
        try:
            self.client.transact_write_items(TransactItems=transact_items)
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def _pages(self, operation: str, kwargs: dict[str, Any]) -> Iterator[dict[str, Any]]:
        call = getattr(self.client, operation)
        while True:
            try:
                response = call(**kwargs)
            except ClientError as e:
                self._handle_error(e)
                raise  # For type checker
            yield response
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs = {**kwargs, "ExclusiveStartKey": last_key}

    def _paginate(self, operation: str, kwargs: dict[str, Any]) -> Iterator[dict[str, Any]]:
        for page in self._pages(operation, kwargs):
            for raw in page.get("Items", []):
                yield self._deserialize(raw)

    def _serialize(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: self._serializer.serialize(v) for k, v in data.items()}

    def _deserialize(self, raw: dict[str, Any]) -> dict[str, Any]:
        return {k: self._deserializer.deserialize(v) for k, v in raw.items()}

    def _handle_error(self, error: ClientError) -> None:
        """
        Convert boto3 errors to store exceptions.

        Args:
            error: ClientError from boto3

        Raises:
            ConditionFailedError: If a condition check failed
            TransactionConflictError: If a transaction was cancelled without a failed condition
            TableNotFoundError: If table not found
            StoreThrottlingError: If throttled
            StorePermissionError: If permission denied
            StoreError: For other errors
        """
        code = error.response["Error"]["Code"]

        if code == "ConditionalCheckFailedException":
            raise ConditionFailedError(f"Condition failed: {error}")
        elif code == "TransactionCanceledException":
            reasons = error.response.get("CancellationReasons", [])
            if any(r.get("Code") == "ConditionalCheckFailed" for r in reasons):
                raise ConditionFailedError(f"Transaction condition failed: {error}")
            raise TransactionConflictError(f"Transaction cancelled: {error}")
        elif code == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{self.table_name}' not found")
        elif code in _THROTTLING_CODES:
            raise StoreThrottlingError("DynamoDB throttling - retry with backoff")
        elif code == "AccessDeniedException":
            raise StorePermissionError("AWS permission denied")
        else:
            raise StoreError(f"DynamoDB error: {error}")


def _item_to_record(item: Item) -> dict[str, Any]:
    key = format_key(PREFIX_ITEM, item.id)
    return {
        ATTR_PK: key,
        ATTR_SK: key,
        ATTR_RECORD_TYPE: PREFIX_ITEM,
        ATTR_MATCH_KEY: match_key(item.type, item.category),
        "id": item.id,
        "owner_id": item.owner_id,
        "item_type": item.type.value,
        "category": item.category,
        "title": item.title,
        "description": item.description,
        # TypeSerializer rejects float
        "latitude": Decimal(str(item.latitude)),
        "longitude": Decimal(str(item.longitude)),
        "is_resolved": item.is_resolved,
        "resolution_type": item.resolution_type.value,
        "linked_match_id": item.linked_match_id,
        ATTR_CREATED_AT: item.created_at,
        ATTR_UPDATED_AT: item.updated_at,
        "resolved_at": item.resolved_at,
    }


def record_to_item(data: dict[str, Any]) -> Item:
    resolved_at = data.get("resolved_at")
    return Item(
        id=str(data["id"]),
        owner_id=str(data["owner_id"]),
        type=ItemType(data["item_type"]),
        category=str(data["category"]),
        title=str(data.get("title", "")),
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        description=str(data.get("description") or ""),
        is_resolved=bool(data.get("is_resolved", False)),
        resolution_type=ResolutionType(data.get("resolution_type", ResolutionType.NONE.value)),
        linked_match_id=data.get("linked_match_id"),
        created_at=int(data.get(ATTR_CREATED_AT, 0)),
        updated_at=int(data.get(ATTR_UPDATED_AT, 0)),
        resolved_at=int(resolved_at) if resolved_at is not None else None,
    )
