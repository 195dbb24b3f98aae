"""
Retention cleanup command.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from dataclasses import asdict

import click

from ..constants import DEFAULT_TABLE_NAME, RETENTION_DAYS
from ..core.client import DynamoDBStore
from ..core.sweeper import expire_stale_items
from ..exceptions import LostFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import output_json, output_text, report_error

logger = get_logger(__name__)


@click.command("cleanup")
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=RETENTION_DAYS,
    show_default=True,
    help="Expire open items older than this many days",
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
def cleanup_command(
    ctx: click.Context,
    days: int,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Expire open items older than the retention period.

    Meant to be run once a day (cron, EventBridge). Items are expired in
    atomic batches of up to 100.

    \b
    Output Format:
        Returns JSON:
        {"cutoff": 1234567890, "candidates": 3, "expired": 3, "failed_batches": 0}
    """
    setup_logging(verbose)

    try:
        client = DynamoDBStore(table, region, profile)
        result = expire_stale_items(client, retention_days=days)

        if text:
            output_text(f"✅ Expired {result.expired} of {result.candidates} old items")
            if result.failed_batches:
                output_text(f"⚠️  {result.failed_batches} batch(es) failed, rerun to retry")
        else:
            output_json(asdict(result))

        if result.failed_batches:
            ctx.exit(3)

    except LostFoundError as e:
        ctx.exit(report_error(str(e), e.code, "Rerun later; the sweep is safe to repeat", text))
