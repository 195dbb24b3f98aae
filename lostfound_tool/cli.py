"""CLI entry point for lostfound-tool.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from lostfound_tool.engine.commands.cleanup_commands import cleanup_command
from lostfound_tool.engine.commands.item_commands import (
    get_item_command,
    match_command,
    report_command,
)
from lostfound_tool.engine.commands.table_commands import (
    create_table_command,
    drop_table_command,
)
from lostfound_tool.engine.commands.user_commands import (
    register_token_command,
    resolve_command,
    stats_command,
)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Match lost and found items by category and proximity"""
    pass


# Register table commands
main.add_command(create_table_command)
main.add_command(drop_table_command)

# Register item commands
main.add_command(report_command)
main.add_command(get_item_command)
main.add_command(match_command)

# Register caller commands
main.add_command(register_token_command)
main.add_command(resolve_command)
main.add_command(stats_command)

# Register maintenance commands
main.add_command(cleanup_command)

if __name__ == "__main__":
    main()
