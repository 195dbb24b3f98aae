"""
Candidate search for newly reported items.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from botocore.exceptions import BotoCoreError

from ..constants import MATCH_DISTANCE_KM
from ..exceptions import InvalidArgumentError, StoreError, TransientError
from ..logging_config import get_logger
from ..models import Item
from .client import DynamoDBStore
from .geo import haversine_km

logger = get_logger(__name__)


def find_candidates(
    client: DynamoDBStore,
    item: Item,
    max_distance_km: float = MATCH_DISTANCE_KM,
) -> list[Item]:
    """
    Find open items of the opposite type near a new item.

    Candidates share the item's category, belong to a different owner and lie
    within max_distance_km. Order follows the store query (oldest first); no
    ranking is applied.

    Args:
        client: DynamoDB store
        item: Newly created item
        max_distance_km: Inclusive distance threshold

    Returns:
        Matching candidate items; empty if the item is already resolved

    Raises:
        TransientError: If the candidate query fails
    """
    if item.is_resolved:
        logger.info(f"Item '{item.id}' already resolved, skipping match")
        return []

    try:
        pool = client.query_open_items(item.type.opposite, item.category)
    except (StoreError, BotoCoreError) as e:
        raise TransientError(f"Candidate query failed for item '{item.id}': {e}", e) from e

    matches: list[Item] = []
    for candidate in pool:
        if candidate.id == item.id or candidate.owner_id == item.owner_id:
            continue
        try:
            distance = haversine_km(
                item.latitude, item.longitude, candidate.latitude, candidate.longitude
            )
        except InvalidArgumentError as e:
            logger.warning(f"Skipping candidate '{candidate.id}': {e}")
            continue
        logger.debug(f"Candidate '{candidate.id}' is {distance:.3f} km from '{item.id}'")
        if distance <= max_distance_km:
            matches.append(candidate)

    logger.info(f"Found {len(matches)} potential matches for item '{item.id}'")
    return matches
