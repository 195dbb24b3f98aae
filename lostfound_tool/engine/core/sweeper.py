"""
Retention sweep: expire items left open too long.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time

from botocore.exceptions import BotoCoreError

from ..constants import RETENTION_DAYS, SECONDS_PER_DAY, TRANSACTION_MAX_ITEMS
from ..exceptions import StoreError, TransientError
from ..logging_config import get_logger
from ..models import SweepResult
from .client import DynamoDBStore

logger = get_logger(__name__)


def expire_stale_items(
    client: DynamoDBStore,
    retention_days: int = RETENTION_DAYS,
    now: int | None = None,
    batch_size: int = TRANSACTION_MAX_ITEMS,
) -> SweepResult:
    """
    Expire every open item created before now - retention_days.

    Items are written in all-or-nothing batches of at most batch_size. A
    failed batch is logged and counted; later batches still run.

    Args:
        client: DynamoDB store
        retention_days: Age after which open items expire
        now: Epoch seconds (defaults to current time)
        batch_size: Items per transaction (capped at the DynamoDB limit)

    Returns:
        Sweep summary

    Raises:
        TransientError: If the stale-item query fails
    """
    ts = int(time.time()) if now is None else now
    cutoff = ts - retention_days * SECONDS_PER_DAY
    batch_size = max(1, min(batch_size, TRANSACTION_MAX_ITEMS))

    try:
        stale = client.query_stale_items(cutoff)
    except (StoreError, BotoCoreError) as e:
        raise TransientError(f"Stale item query failed: {e}", e) from e

    if not stale:
        logger.info("No old items to clean up")
        return SweepResult(cutoff=cutoff, candidates=0, expired=0, failed_batches=0)

    expired = 0
    failed_batches = 0
    for start in range(0, len(stale), batch_size):
        batch_ids = [item.id for item in stale[start : start + batch_size]]
        try:
            client.expire_items(batch_ids, ts)
            expired += len(batch_ids)
        except (StoreError, BotoCoreError) as e:
            failed_batches += 1
            logger.error(f"Expiry batch of {len(batch_ids)} items failed: {e}")

    logger.info(f"Cleaned up {expired} of {len(stale)} old items ({failed_batches} failed batches)")
    return SweepResult(
        cutoff=cutoff, candidates=len(stale), expired=expired, failed_batches=failed_batches
    )
