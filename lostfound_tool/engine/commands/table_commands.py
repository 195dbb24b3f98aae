"""
Table management commands.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Literal

import click

from ..constants import DEFAULT_TABLE_NAME
from ..core.table_operations import create_table, drop_table
from ..exceptions import StoreError, TableAlreadyExistsError, TableNotFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, output_json, output_text, report_error, validate_table_name

logger = get_logger(__name__)


@click.command("create-table")
@click.option("--table", envvar="LOSTFOUND_TABLE", default=DEFAULT_TABLE_NAME, help="DynamoDB table name")
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option(
    "--billing",
    type=click.Choice(["on-demand", "provisioned"]),
    default="on-demand",
    help="Billing mode (default: on-demand)",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def create_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    billing: str,
    text: bool,
    verbose: int,
) -> None:
    """Create the DynamoDB table.

    Creates a table with partition key (PK), sort key (SK), the match GSI
    (match_key, created_at) and a NEW_IMAGE stream for the item-created handler.

    Examples:

    \b
        # Create table with default name
        lostfound-tool create-table

    \b
        # Create with provisioned billing
        lostfound-tool create-table --table my-items --billing provisioned

    \b
    Output Format:
        Returns JSON with table details:
        {"table": "...", "status": "CREATING", "arn": "..."}
    """
    setup_logging(verbose)

    try:
        validate_table_name(table)
        logger.info(f"Creating table '{table}'")
        logger.debug(f"Region: {region}, Billing: {billing}")

        billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = (
            "PAY_PER_REQUEST" if billing == "on-demand" else "PROVISIONED"
        )
        table_desc = create_table(table, region, profile, billing_mode)

        if text:
            output_text(f"✅ Table '{table}' created successfully")
            output_text(f"Status: {table_desc['TableStatus']}")
            output_text(f"ARN: {table_desc['TableArn']}")
        else:
            output_json(
                {
                    "table": table,
                    "status": table_desc["TableStatus"],
                    "arn": table_desc["TableArn"],
                }
            )

    except ValueError as e:
        ctx.exit(report_error(str(e), "invalid-argument", "Use 3-255 letters, digits, '-', '_' or '.'", text))

    except TableAlreadyExistsError as e:
        solution = (
            f"Use a different table name or drop the existing table with "
            f"'lostfound-tool drop-table --table {table} --approve'"
        )
        ctx.exit(report_error(str(e), "failed-precondition", solution, text))

    except StoreError as e:
        ctx.exit(report_error(str(e), e.code, "Check AWS credentials and permissions", text))


@click.command("drop-table")
@click.option("--table", envvar="LOSTFOUND_TABLE", default=DEFAULT_TABLE_NAME, help="DynamoDB table name")
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--approve", is_flag=True, help="Required flag to confirm table deletion")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def drop_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    approve: bool,
    text: bool,
    verbose: int,
) -> None:
    """Drop the DynamoDB table.

    WARNING: This permanently deletes every item, user, match and resolution.

    Examples:

    \b
        # Drop with approval
        lostfound-tool drop-table --approve

    \b
    Output Format:
        Returns JSON with confirmation:
        {"table": "...", "status": "DELETING"}
    """
    setup_logging(verbose)

    if not approve:
        cmd = f"lostfound-tool drop-table --table {table} --approve"
        if text:
            click.echo("⚠️  WARNING: Table deletion requires approval", err=True)
            click.echo(f"\nThis will permanently delete table '{table}' and ALL data.", err=True)
            click.echo(f"\nTo proceed, use: {cmd}", err=True)
        else:
            click.echo(
                error_json("Table deletion requires approval", f"Add --approve flag: {cmd}", 2),
                err=True,
            )
        ctx.exit(2)

    try:
        logger.info(f"Dropping table '{table}'")
        table_desc = drop_table(table, region, profile)

        if text:
            output_text(f"✅ Table '{table}' deletion initiated")
            output_text(f"Status: {table_desc['TableStatus']}")
        else:
            output_json({"table": table, "status": table_desc["TableStatus"]})

    except TableNotFoundError as e:
        ctx.exit(report_error(str(e), "not-found", "Check table name", text))

    except StoreError as e:
        ctx.exit(report_error(str(e), e.code, "Check AWS credentials and permissions", text))
