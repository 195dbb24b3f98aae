"""
Caller-facing commands: register-token, resolve, stats.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import DEFAULT_TABLE_NAME
from ..core.client import DynamoDBStore
from ..core.notifier import build_notifier
from ..core.resolution import resolve_item
from ..core.statistics import get_statistics
from ..core.token_operations import register_device_token
from ..exceptions import LostFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import output_json, output_text, report_error

logger = get_logger(__name__)

_SOLUTIONS = {
    "unauthenticated": "Pass --caller or set LOSTFOUND_CALLER_ID",
    "invalid-argument": "Check the command arguments",
    "not-found": "Check the item id",
    "permission-denied": "Only the item owner can do this",
    "failed-precondition": "The item is already resolved",
}


def _solution(error: LostFoundError) -> str:
    return _SOLUTIONS.get(error.code, "Check table exists and AWS credentials")


@click.command("register-token")
@click.argument("token")
@click.option("--caller", envvar="LOSTFOUND_CALLER_ID", help="Verified caller id")
@click.option("--table", envvar="LOSTFOUND_TABLE", default=DEFAULT_TABLE_NAME, help="DynamoDB table name")
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def register_token_command(
    ctx: click.Context,
    token: str,
    caller: str | None,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Register a push device token for the caller.

    Tokens form a set; registering the same token twice is a no-op.

    \b
    Output Format:
        Returns JSON:
        {"success": true}
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        result = register_device_token(client, caller, token)

        if text:
            output_text("✅ Device token registered")
        else:
            output_json(result)

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, _solution(e), text))


@click.command("resolve")
@click.argument("item_id")
@click.option(
    "--type",
    "resolution_type",
    type=click.Choice(["matched", "expired", "other"]),
    required=True,
    help="Resolution type",
)
@click.option("--match", "match_id", help="Counterpart item id")
@click.option("--caller", envvar="LOSTFOUND_CALLER_ID", help="Verified caller id")
@click.option(
    "--notifier",
    envvar="LOSTFOUND_NOTIFIER",
    type=click.Choice(["sns", "log"]),
    default="sns",
    help="Push backend ('log' only logs)",
)
@click.option(
    "--platform-app-arn",
    envvar="LOSTFOUND_SNS_PLATFORM_APP_ARN",
    help="SNS platform application ARN for raw device tokens",
)
@click.option("--table", envvar="LOSTFOUND_TABLE", default=DEFAULT_TABLE_NAME, help="DynamoDB table name")
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def resolve_command(
    ctx: click.Context,
    item_id: str,
    resolution_type: str,
    match_id: str | None,
    caller: str | None,
    notifier: str,
    platform_app_arn: str | None,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Resolve an item you own, optionally linking its counterpart.

    With --match, both items and a resolution record are written in one
    transaction and the counterpart owner is notified.

    Examples:

    \b
        # Lost wallet was returned via a found report
        lostfound-tool resolve <lost-id> --type matched --match <found-id> --caller U1

    \b
        # Close without a counterpart
        lostfound-tool resolve <item-id> --type other --caller U1

    \b
    Exit Codes:
        0 resolved, 1 not found, 2 invalid argument, 3 store error,
        4 unauthenticated, 5 not the owner, 6 already resolved
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        push = build_notifier(notifier, region, profile, platform_app_arn)
        result = resolve_item(client, push, caller, item_id, resolution_type, match_id)

        if text:
            output_text(f"✅ Item {item_id} resolved as {resolution_type}")
        else:
            output_json(result)

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, _solution(e), text))


@click.command("stats")
@click.option("--caller", envvar="LOSTFOUND_CALLER_ID", help="Verified caller id")
@click.option("--table", envvar="LOSTFOUND_TABLE", default=DEFAULT_TABLE_NAME, help="DynamoDB table name")
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def stats_command(
    ctx: click.Context,
    caller: str | None,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Show item counts and the resolution success rate.

    \b
    Output Format:
        Returns JSON:
        {"totalItems": 5, "lostItems": 3, "foundItems": 2,
         "resolvedItems": 1, "userItems": 2, "successRate": 20.0}
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        stats = get_statistics(client, caller)

        if text:
            output_text(f"Items:    {stats['totalItems']} ({stats['lostItems']} lost, {stats['foundItems']} found)")
            output_text(f"Resolved: {stats['resolvedItems']} ({stats['successRate']}%)")
            output_text(f"Yours:    {stats['userItems']}")
        else:
            output_json(stats)

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, _solution(e), text))
