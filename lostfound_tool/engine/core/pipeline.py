"""
Item-created pipeline: match, then notify and record concurrently.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time

from ..constants import MATCH_DISTANCE_KM
from ..logging_config import get_logger
from ..models import Item, MatchRunResult
from .client import DynamoDBStore
from .dispatcher import notification_tasks
from .fanout import run_all
from .matcher import find_candidates
from .notifier import Notifier
from .recorder import record_tasks

logger = get_logger(__name__)


def on_item_created(
    client: DynamoDBStore,
    notifier: Notifier,
    item: Item,
    max_distance_km: float = MATCH_DISTANCE_KM,
    now: int | None = None,
) -> MatchRunResult:
    """
    Handle a newly created item.

    Safe to run more than once for the same item: match records are keyed by
    the item pair, so a redelivered trigger reports duplicates instead of
    writing new records. Notifications are not deduplicated.

    Args:
        client: DynamoDB store
        notifier: Push notifier
        item: The created item
        max_distance_km: Inclusive distance threshold
        now: Epoch seconds for record timestamps (defaults to current time)

    Returns:
        Matches and one outcome per notify/record task

    Raises:
        TransientError: If the candidate query fails
    """
    ts = int(time.time()) if now is None else now
    matches = find_candidates(client, item, max_distance_km)
    if not matches:
        return MatchRunResult(item_id=item.id, matches=[], outcomes=[])

    tasks = notification_tasks(client, notifier, item.id, matches)
    tasks += record_tasks(client, item.id, matches, ts)
    outcomes = run_all(tasks)

    failed = sum(1 for o in outcomes if o.status == "failed")
    logger.info(
        f"Item '{item.id}': {len(matches)} matches, {len(outcomes)} tasks, {failed} failed"
    )
    return MatchRunResult(item_id=item.id, matches=matches, outcomes=outcomes)
