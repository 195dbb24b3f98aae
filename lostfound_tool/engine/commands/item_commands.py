"""
Item commands: report, get-item, match.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import DEFAULT_TABLE_NAME, MATCH_DISTANCE_KM
from ..core.client import DynamoDBStore
from ..core.item_operations import get_item, report_item
from ..core.notifier import build_notifier
from ..core.pipeline import on_item_created
from ..exceptions import LostFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import output_json, output_text, report_error

logger = get_logger(__name__)


@click.command("report")
@click.argument("item_type", type=click.Choice(["lost", "found"], case_sensitive=False))
@click.option("--category", required=True, help="Category tag (e.g. wallet, phone)")
@click.option("--title", required=True, help="Short title shown in notifications")
@click.option("--lat", "latitude", type=float, required=True, help="Latitude in decimal degrees")
@click.option("--lon", "longitude", type=float, required=True, help="Longitude in decimal degrees")
@click.option("--description", default="", help="Free-text description")
@click.option("--caller", envvar="LOSTFOUND_CALLER_ID", help="Verified caller id")
@click.option(
    "--max-distance-km",
    envvar="LOSTFOUND_MATCH_DISTANCE_KM",
    type=float,
    default=MATCH_DISTANCE_KM,
    show_default=True,
    help="Match distance threshold",
)
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
@click.option("--no-match", is_flag=True, help="Store the item without running the matcher")
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
def report_command(
    ctx: click.Context,
    item_type: str,
    category: str,
    title: str,
    latitude: float,
    longitude: float,
    description: str,
    caller: str | None,
    max_distance_km: float,
    notifier: str,
    platform_app_arn: str | None,
    no_match: bool,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Report a lost or found item and notify nearby matches.

    Stores the item, then runs the same pipeline the stream handler runs:
    candidate search, push notifications and match records.

    Examples:

    \b
        # Report a lost wallet
        lostfound-tool report lost --category wallet --title "Brown wallet" \\
            --lat 40.0 --lon -73.0 --caller U1

    \b
    Output Format:
        Returns JSON:
        {"item": {...}, "matches": ["<id>"], "outcomes": [...]}
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        item = report_item(
            client, caller, item_type, category, title, latitude, longitude, description
        )
        data: dict = {"item": item.to_dict()}

        if not no_match:
            push = build_notifier(notifier, region, profile, platform_app_arn)
            result = on_item_created(client, push, item, max_distance_km)
            data.update(result.to_dict())
            del data["item_id"]

        if text:
            output_text(f"✅ Reported {item.type.value} item {item.id}")
            if not no_match:
                output_text(f"Matches: {len(data['matches'])}")
        else:
            output_json(data)

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, "Check the item fields and caller id", text))


@click.command("get-item")
@click.argument("item_id")
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
def get_item_command(
    ctx: click.Context,
    item_id: str,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Show a stored item.

    \b
    Output Format:
        Returns the item as JSON.
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        item = get_item(client, item_id)

        if text:
            state = item.resolution_type.value if item.is_resolved else "open"
            output_text(f"{item.id} [{item.type.value}/{item.category}] {item.title} ({state})")
        else:
            output_json(item.to_dict())

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, "Check the item id and table", text))


@click.command("match")
@click.argument("item_id")
@click.option(
    "--max-distance-km",
    envvar="LOSTFOUND_MATCH_DISTANCE_KM",
    type=float,
    default=MATCH_DISTANCE_KM,
    show_default=True,
    help="Match distance threshold",
)
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
def match_command(
    ctx: click.Context,
    item_id: str,
    max_distance_km: float,
    notifier: str,
    platform_app_arn: str | None,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Re-run the item-created pipeline for a stored item.

    Match records are keyed by item pair, so re-running reports duplicates
    instead of writing new records. Notifications are sent again.

    \b
    Output Format:
        Returns JSON:
        {"item_id": "...", "matches": [...], "outcomes": [...]}
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        item = get_item(client, item_id)
        push = build_notifier(notifier, region, profile, platform_app_arn)
        result = on_item_created(client, push, item, max_distance_km)

        if text:
            output_text(f"{item_id}: {len(result.matches)} matches")
            for outcome in result.outcomes:
                output_text(f"  {outcome.task:<7} {outcome.candidate_id} {outcome.status}")
        else:
            output_json(result.to_dict())

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, "Retry; the candidate query is safe to repeat", text))
