"""
Dashboard statistics.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any

from botocore.exceptions import BotoCoreError

from ..exceptions import InternalError, StoreError, UnauthenticatedError
from ..logging_config import get_logger
from ..models import ItemType
from .client import DynamoDBStore

logger = get_logger(__name__)


def success_rate(resolved: int, total: int) -> float:
    """Resolved share of all items as a percentage, one decimal; 0 when there are none."""
    if total <= 0:
        return 0.0
    return round(resolved / total * 100, 1)


def get_statistics(client: DynamoDBStore, caller_id: str | None) -> dict[str, Any]:
    """Get global item counts plus the caller's own item count.

    Raises:
        UnauthenticatedError: If there is no caller
        InternalError: For store failures
    """
    if not caller_id:
        raise UnauthenticatedError("User must be authenticated to get statistics")

    try:
        lost = client.count_items(item_type=ItemType.LOST)
        found = client.count_items(item_type=ItemType.FOUND)
        resolved = client.count_items(is_resolved=True)
        mine = client.count_items(owner_id=caller_id)
    except (StoreError, BotoCoreError) as e:
        logger.error(f"Error generating statistics: {e}")
        raise InternalError(str(e), e) from e

    total = lost + found
    return {
        "totalItems": total,
        "lostItems": lost,
        "foundItems": found,
        "resolvedItems": resolved,
        "userItems": mine,
        "successRate": success_rate(resolved, total),
    }
