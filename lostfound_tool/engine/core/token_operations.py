"""
Device token registration.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from typing import Any

from botocore.exceptions import BotoCoreError

from ..exceptions import InternalError, InvalidArgumentError, StoreError, UnauthenticatedError
from ..logging_config import get_logger
from .client import DynamoDBStore

logger = get_logger(__name__)


def register_device_token(
    client: DynamoDBStore,
    caller_id: str | None,
    token: str | None,
    now: int | None = None,
) -> dict[str, Any]:
    """
    Add a push token to the caller's token set (idempotent).

    Raises:
        UnauthenticatedError: If there is no caller
        InvalidArgumentError: If the token is empty
        InternalError: For store failures
    """
    if not caller_id:
        raise UnauthenticatedError("User must be authenticated to update the device token")
    token_norm = (token or "").strip()
    if not token_norm:
        raise InvalidArgumentError("Device token must be provided")

    ts = int(time.time()) if now is None else now
    try:
        client.add_device_token(caller_id, token_norm, ts)
    except (StoreError, BotoCoreError) as e:
        logger.error(f"Error updating device token for '{caller_id}': {e}")
        raise InternalError(str(e), e) from e

    logger.info(f"Registered device token for user '{caller_id}'")
    return {"success": True}
