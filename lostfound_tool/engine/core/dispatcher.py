"""
Best-effort push notifications for discovered matches.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from ..constants import CLICK_ACTION, TITLE_MATCH_FOR_FOUND, TITLE_MATCH_FOR_LOST
from ..logging_config import get_logger
from ..models import Item, ItemType, Notification
from .client import DynamoDBStore
from .fanout import FanoutTask
from .notifier import Notifier

logger = get_logger(__name__)


def build_match_notification(candidate: Item, source_item_id: str) -> Notification:
    """Build the message telling a candidate's owner about a new potential match."""
    title = TITLE_MATCH_FOR_LOST if candidate.type is ItemType.LOST else TITLE_MATCH_FOR_FOUND
    return Notification(
        title=title,
        body=f'There\'s a potential match for "{candidate.title}"',
        data={
            "itemId": candidate.id,
            "matchId": source_item_id,
            "click_action": CLICK_ACTION,
        },
    )


def notify_owner(
    client: DynamoDBStore,
    notifier: Notifier,
    owner_id: str,
    notification: Notification,
) -> str:
    """
    Send a notification to every device registered by a user.

    Returns:
        "skipped" if the user has no tokens, "sent" if at least one token
        accepted the message, "undelivered" otherwise

    Raises:
        StoreError: If the user lookup fails
        NotificationError: If the notifier cannot attempt delivery
    """
    user = client.get_user(owner_id)
    if user is None or not user.device_tokens:
        logger.debug(f"User '{owner_id}' has no device tokens, skipping")
        return "skipped"

    result = notifier.send_multicast(notification, sorted(user.device_tokens))
    logger.info(
        f"Notified user '{owner_id}': {result.success_count} sent, {result.failure_count} failed"
    )
    return "sent" if result.success_count > 0 else "undelivered"


def notification_tasks(
    client: DynamoDBStore,
    notifier: Notifier,
    source_item_id: str,
    candidates: list[Item],
) -> list[FanoutTask]:
    """One notify task per candidate, ready for the fanout."""
    tasks: list[FanoutTask] = []
    for candidate in candidates:
        notification = build_match_notification(candidate, source_item_id)

        def task(owner_id: str = candidate.owner_id, message: Notification = notification) -> str:
            return notify_owner(client, notifier, owner_id, message)

        tasks.append((candidate.id, "notify", task))
    return tasks
