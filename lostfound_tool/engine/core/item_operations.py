"""
Item reporting and lookup.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
import uuid

from ..exceptions import InvalidArgumentError, NotFoundError, UnauthenticatedError
from ..logging_config import get_logger
from ..models import Item, ItemType
from ..utils import require_text
from .client import DynamoDBStore
from .geo import validate_coordinates

logger = get_logger(__name__)


def parse_item_type(value: str | ItemType | None) -> ItemType:
    """
    Parse 'lost' or 'found'.

    Raises:
        InvalidArgumentError: If the value is neither
    """
    if isinstance(value, ItemType):
        return value
    try:
        return ItemType((value or "").strip().lower())
    except ValueError:
        raise InvalidArgumentError(f"Item type must be 'lost' or 'found', got '{value}'")


def report_item(
    client: DynamoDBStore,
    caller_id: str | None,
    item_type: str | ItemType,
    category: str,
    title: str,
    latitude: float,
    longitude: float,
    description: str = "",
    now: int | None = None,
) -> Item:
    """
    Create a new open item owned by the caller.

    Categories are normalized to lower case so they match exactly.

    Returns:
        The stored item

    Raises:
        UnauthenticatedError: If there is no caller
        InvalidArgumentError: If a field is missing or coordinates are out of range
        StoreError: For DynamoDB errors
    """
    if not caller_id:
        raise UnauthenticatedError("User must be authenticated to report an item")
    parsed_type = parse_item_type(item_type)
    try:
        category_norm = require_text(category, "Category").lower()
        title_norm = require_text(title, "Title")
    except ValueError as e:
        raise InvalidArgumentError(str(e))
    validate_coordinates(latitude, longitude)

    ts = int(time.time()) if now is None else now
    item = Item(
        id=uuid.uuid4().hex,
        owner_id=caller_id,
        type=parsed_type,
        category=category_norm,
        title=title_norm,
        latitude=latitude,
        longitude=longitude,
        description=(description or "").strip(),
        created_at=ts,
        updated_at=ts,
    )
    client.put_item(item)
    logger.info(f"Reported {parsed_type.value} item '{item.id}' in '{category_norm}'")
    return item


def get_item(client: DynamoDBStore, item_id: str) -> Item:
    """
    Load an item.

    Raises:
        NotFoundError: If the item does not exist
    """
    item = client.get_item(item_id)
    if item is None:
        raise NotFoundError(f"Item '{item_id}' not found")
    return item
