"""
Resolution of items by their owners.

An item moves from open to resolved exactly once. When a counterpart item is
named, both items, and the resolution record linking them, are written in one
DynamoDB transaction guarded by ``is_resolved = false`` on each item, so two
concurrent resolve calls cannot both succeed.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from typing import Any

from botocore.exceptions import BotoCoreError

from ..constants import CLICK_ACTION, TITLE_RESOLVED
from ..exceptions import (
    AlreadyResolvedError,
    ConditionFailedError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    UnauthenticatedError,
)
from ..logging_config import get_logger
from ..models import Item, Notification, ResolutionRecord, ResolutionType
from .client import DynamoDBStore
from .dispatcher import notify_owner
from .notifier import Notifier

logger = get_logger(__name__)


def parse_resolution_type(value: str | ResolutionType | None) -> ResolutionType:
    """
    Parse a caller-supplied resolution type.

    Raises:
        InvalidArgumentError: If missing, unknown, or 'none'
    """
    if isinstance(value, ResolutionType):
        parsed = value
    else:
        try:
            parsed = ResolutionType((value or "").strip().lower())
        except ValueError:
            choices = ", ".join(t.value for t in ResolutionType if t is not ResolutionType.NONE)
            raise InvalidArgumentError(f"Unknown resolution type '{value}' (expected {choices})")
    if parsed is ResolutionType.NONE:
        raise InvalidArgumentError("Resolution type cannot be 'none'")
    return parsed


def build_resolved_notification(counterpart: Item, item_id: str) -> Notification:
    """Build the message telling a counterpart owner their item was matched."""
    return Notification(
        title=TITLE_RESOLVED,
        body=(
            f'Your {counterpart.type.value} item "{counterpart.title}" '
            f"has been matched with another user."
        ),
        data={
            "itemId": counterpart.id,
            "matchId": item_id,
            "resolutionType": ResolutionType.MATCHED.value,
            "click_action": CLICK_ACTION,
        },
    )


def resolve_item(
    client: DynamoDBStore,
    notifier: Notifier,
    caller_id: str | None,
    item_id: str | None,
    resolution_type: str | ResolutionType | None,
    match_id: str | None = None,
    now: int | None = None,
) -> dict[str, Any]:
    """
    Mark an item resolved, optionally linking and resolving its counterpart.

    Args:
        client: DynamoDB store
        notifier: Push notifier for the counterpart owner
        caller_id: Verified caller id (None if unauthenticated)
        item_id: Item to resolve; must be owned by the caller
        resolution_type: 'matched', 'expired' or 'other'
        match_id: Counterpart item id (optional); skipped if it does not exist
        now: Epoch seconds for timestamps (defaults to current time)

    Returns:
        {"success": True}

    Raises:
        UnauthenticatedError: If there is no caller
        InvalidArgumentError: If item_id or resolution_type is missing or invalid
        NotFoundError: If the item does not exist
        PermissionDeniedError: If the caller does not own the item
        AlreadyResolvedError: If either item is already resolved
        InternalError: For unexpected store failures
    """
    if not caller_id:
        raise UnauthenticatedError("User must be authenticated to resolve an item")
    if not item_id or not resolution_type:
        raise InvalidArgumentError("Item ID and resolution type must be provided")
    rtype = parse_resolution_type(resolution_type)
    match_id = match_id or None
    if match_id == item_id:
        raise InvalidArgumentError("An item cannot be matched with itself")

    ts = int(time.time()) if now is None else now

    try:
        counterpart = _transition(client, caller_id, item_id, rtype, match_id, ts)
    except ConditionFailedError as e:
        raise AlreadyResolvedError(f"Item '{item_id}' or its match was already resolved") from e
    except (StoreError, BotoCoreError, KeyError, TypeError, ValueError) as e:
        # KeyError/ValueError: stored item could not be decoded
        logger.error(f"Error resolving item '{item_id}': {e}")
        raise InternalError(f"Error resolving item: {e}", e) from e

    if counterpart is not None:
        try:
            status = notify_owner(
                client,
                notifier,
                counterpart.owner_id,
                build_resolved_notification(counterpart, item_id),
            )
            logger.info(f"Counterpart owner '{counterpart.owner_id}' notification: {status}")
        except Exception:
            # Delivery is best-effort; the resolution is already committed
            logger.exception(f"Error notifying owner of matched item '{counterpart.id}'")

    return {"success": True}


def _transition(
    client: DynamoDBStore,
    caller_id: str,
    item_id: str,
    rtype: ResolutionType,
    match_id: str | None,
    ts: int,
) -> Item | None:
    """Load, check and write; returns the resolved counterpart, if any."""
    item = client.get_item(item_id)
    if item is None:
        raise NotFoundError(f"Item '{item_id}' not found")
    if item.owner_id != caller_id:
        raise PermissionDeniedError("Only the item owner can resolve it")
    if item.is_resolved:
        raise AlreadyResolvedError(f"Item '{item_id}' is already resolved")

    counterpart = client.get_item(match_id) if match_id else None
    if counterpart is None:
        if match_id:
            logger.info(f"Match '{match_id}' not found, resolving '{item_id}' alone")
        client.resolve_item(item_id, caller_id, rtype, match_id, ts)
        logger.info(f"Resolved item '{item_id}' as {rtype.value}")
        return None

    if counterpart.is_resolved:
        raise AlreadyResolvedError(f"Matched item '{match_id}' is already resolved")

    record = ResolutionRecord(
        item_id=item_id,
        matched_item_id=counterpart.id,
        resolution_type=rtype,
        created_at=ts,
        resolved_by=caller_id,
    )
    client.resolve_pair(item_id, caller_id, rtype, counterpart.id, record, ts)
    logger.info(f"Resolved item '{item_id}' with match '{counterpart.id}' as {rtype.value}")
    return counterpart
