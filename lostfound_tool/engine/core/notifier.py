"""
Push notification delivery via Amazon SNS mobile push.

Tokens are opaque to the engine. A token that is already an SNS endpoint ARN
is published to directly; a raw device token is turned into a platform
endpoint when a platform application ARN is configured.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
from typing import Iterable, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import NotificationError
from ..logging_config import get_logger
from ..models import MulticastResult, Notification

logger = get_logger(__name__)


class Notifier(Protocol):
    """Best-effort push delivery to a batch of device tokens."""

    def send_multicast(self, notification: Notification, tokens: Iterable[str]) -> MulticastResult:
        ...


class SnsNotifier:
    """Deliver notifications through SNS platform endpoints."""

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        platform_application_arn: str | None = None,
        session: boto3.Session | None = None,
    ):
        """
        Initialize SNS notifier.

        Args:
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            platform_application_arn: SNS platform application for raw device tokens
            session: Pre-built boto3 session (optional, overrides region/profile)
        """
        session = session or boto3.Session(profile_name=profile, region_name=region)
        self.client = session.client("sns")
        self.platform_application_arn = platform_application_arn

    def send_multicast(self, notification: Notification, tokens: Iterable[str]) -> MulticastResult:
        """
        Publish one notification to every token independently.

        A failure on one token is logged and counted; it never aborts the rest.
        """
        message = json.dumps(build_sns_message(notification))
        success = 0
        failed: list[str] = []
        for token in tokens:
            try:
                self.client.publish(
                    TargetArn=self._endpoint_for(token),
                    Message=message,
                    MessageStructure="json",
                )
                success += 1
            except (ClientError, BotoCoreError, NotificationError) as e:
                logger.warning(f"Push delivery failed for token '{token[:12]}...': {e}")
                failed.append(token)
        return MulticastResult(
            success_count=success, failure_count=len(failed), failed_tokens=tuple(failed)
        )

    def _endpoint_for(self, token: str) -> str:
        if token.startswith("arn:"):
            return token
        if not self.platform_application_arn:
            raise NotificationError("Raw device token requires a platform application ARN")
        # CreatePlatformEndpoint is idempotent for an existing token
        response = self.client.create_platform_endpoint(
            PlatformApplicationArn=self.platform_application_arn, Token=token
        )
        return str(response["EndpointArn"])


class LogNotifier:
    """Log notifications instead of sending them (dry runs, local use)."""

    def send_multicast(self, notification: Notification, tokens: Iterable[str]) -> MulticastResult:
        token_list = list(tokens)
        logger.info(
            f"[dry-run] '{notification.title}' -> {len(token_list)} device(s): {notification.body}"
        )
        return MulticastResult(success_count=len(token_list), failure_count=0)


def build_sns_message(notification: Notification) -> dict[str, str]:
    """Build the per-platform JSON message structure SNS expects."""
    gcm = {
        "notification": {"title": notification.title, "body": notification.body},
        "data": notification.data,
    }
    apns = {
        "aps": {"alert": {"title": notification.title, "body": notification.body}},
        **notification.data,
    }
    return {
        "default": notification.body,
        "GCM": json.dumps(gcm),
        "APNS": json.dumps(apns),
        "APNS_SANDBOX": json.dumps(apns),
    }


def build_notifier(
    kind: str,
    region: str | None = None,
    profile: str | None = None,
    platform_application_arn: str | None = None,
) -> Notifier:
    """
    Construct a notifier by name.

    Args:
        kind: 'sns' or 'log'

    Raises:
        ValueError: If kind is unknown
    """
    if kind == "sns":
        return SnsNotifier(region, profile, platform_application_arn)
    if kind == "log":
        return LogNotifier()
    raise ValueError(f"Unknown notifier '{kind}' (expected 'sns' or 'log')")
