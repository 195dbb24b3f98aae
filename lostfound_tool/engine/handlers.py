"""
AWS Lambda entry points for the event-driven flows.

``item_created_handler`` consumes the table's DynamoDB Stream;
``scheduled_cleanup_handler`` is invoked by a daily EventBridge schedule.
Clients are constructed per invocation from environment variables:

    LOSTFOUND_TABLE                  table name
    AWS_REGION                       region (set by Lambda)
    LOSTFOUND_MATCH_DISTANCE_KM      match threshold (default 1.0)
    LOSTFOUND_NOTIFIER               'sns' (default) or 'log'
    LOSTFOUND_SNS_PLATFORM_APP_ARN   SNS platform application for raw tokens
    LOG_LEVEL                        WARNING, INFO, DEBUG or TRACE

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import os
from dataclasses import asdict
from typing import Any

from boto3.dynamodb.types import TypeDeserializer

from .constants import DEFAULT_TABLE_NAME, MATCH_DISTANCE_KM, PREFIX_ITEM
from .core.client import DynamoDBStore, record_to_item
from .core.notifier import build_notifier
from .core.pipeline import on_item_created
from .core.sweeper import expire_stale_items
from .logging_config import get_logger, setup_logging_from_env

logger = get_logger(__name__)

_deserializer = TypeDeserializer()


def _build_store() -> DynamoDBStore:
    return DynamoDBStore(
        os.getenv("LOSTFOUND_TABLE", DEFAULT_TABLE_NAME), region=os.getenv("AWS_REGION")
    )


def item_created_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Run the matching pipeline for every item inserted in the stream batch.

    A TransientError propagates so Lambda retries the batch. Malformed item
    records are logged and skipped.
    """
    setup_logging_from_env()
    store = _build_store()
    notifier = build_notifier(
        os.getenv("LOSTFOUND_NOTIFIER", "sns"),
        region=os.getenv("AWS_REGION"),
        platform_application_arn=os.getenv("LOSTFOUND_SNS_PLATFORM_APP_ARN"),
    )
    max_distance = float(os.getenv("LOSTFOUND_MATCH_DISTANCE_KM", str(MATCH_DISTANCE_KM)))

    processed = 0
    matches = 0
    for record in event.get("Records", []):
        if record.get("eventName") != "INSERT":
            continue
        image = record.get("dynamodb", {}).get("NewImage")
        if not image:
            continue
        try:
            data = {k: _deserializer.deserialize(v) for k, v in image.items()}
            if data.get("record_type") != PREFIX_ITEM:
                continue
            item = record_to_item(data)
        except (KeyError, TypeError, ValueError):
            keys = record.get("dynamodb", {}).get("Keys")
            logger.exception(f"Skipping malformed item record {keys}")
            continue

        result = on_item_created(store, notifier, item, max_distance)
        processed += 1
        matches += len(result.matches)

    logger.info(f"Processed {processed} new items, {matches} matches")
    return {"processed": processed, "matches": matches}


def scheduled_cleanup_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Expire stale open items."""
    setup_logging_from_env()
    result = expire_stale_items(_build_store())
    return asdict(result)
