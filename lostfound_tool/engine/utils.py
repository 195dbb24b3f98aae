"""
Utility functions for engine operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
import sys
from typing import Any


def format_key(prefix: str, *parts: str) -> str:
    """
    Format a key with namespace prefix.

    Args:
        prefix: Namespace prefix (e.g., 'item', 'user', 'match')
        parts: Key components joined with ':'

    Returns:
        Formatted key (e.g., 'item:abc123')
    """
    return ":".join((prefix, *parts))


def pair_key(prefix: str, first_id: str, second_id: str) -> str:
    """
    Format an order-independent key for a pair of item ids.

    Args:
        prefix: Namespace prefix ('match' or 'resolution')
        first_id: One item id
        second_id: The other item id

    Returns:
        Key of the form 'prefix:<min>:<max>'
    """
    low, high = sorted((first_id, second_id))
    return format_key(prefix, low, high)


def output_json(data: dict[str, Any], quiet: bool = False) -> None:
    """
    Output JSON to stdout.

    Args:
        data: Data to output as JSON
        quiet: If True, suppress output
    """
    if not quiet:
        print(json.dumps(data, default=str))


def output_text(message: str, quiet: bool = False) -> None:
    """
    Output text to stdout.

    Args:
        message: Message to output
        quiet: If True, suppress output
    """
    if not quiet:
        print(message)


def error_json(error: str, solution: str, exit_code: int) -> str:
    """
    Format error as a JSON line.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code

    Returns:
        JSON-encoded error object
    """
    return json.dumps({"error": error, "solution": solution, "exit_code": exit_code})


def error_text(error: str, solution: str) -> str:
    """
    Format error as human-readable text.

    Args:
        error: Error message
        solution: Solution suggestion

    Returns:
        Formatted error message
    """
    return f"❌ Error: {error}\n\n💡 Solution: {solution}"


def validate_table_name(table_name: str) -> bool:
    """
    Validate DynamoDB table name.

    Args:
        table_name: Table name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If table name is invalid
    """
    if not table_name:
        raise ValueError("Table name cannot be empty")
    if len(table_name) < 3 or len(table_name) > 255:
        raise ValueError("Table name must be between 3 and 255 characters")
    if not all(c.isalnum() or c in "-_." for c in table_name):
        raise ValueError(
            "Table name can only contain alphanumeric characters, hyphens, underscores, and periods"
        )
    return True


def require_text(value: str | None, field_name: str) -> str:
    """
    Strip a required text field.

    Raises:
        ValueError: If the value is missing or blank
    """
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{field_name} must be provided")
    return text


# CLI exit codes by error code
EXIT_CODES = {
    "not-found": 1,
    "invalid-argument": 2,
    "internal": 3,
    "unavailable": 3,
    "unauthenticated": 4,
    "permission-denied": 5,
    "failed-precondition": 6,
}


def exit_code_for(code: str) -> int:
    """Map an error code to a CLI exit code (3 for anything unknown)."""
    return EXIT_CODES.get(code, 3)


def report_error(error: str, code: str, solution: str, text_format: bool = False) -> int:
    """
    Write an error to stderr in the selected format.

    Args:
        error: Error message
        code: Error code (e.g., 'not-found')
        solution: Solution suggestion
        text_format: If True, output as text; otherwise JSON

    Returns:
        Exit code the caller should exit with
    """
    exit_code = exit_code_for(code)
    if text_format:
        sys.stderr.write(error_text(error, solution) + "\n")
    else:
        sys.stderr.write(error_json(error, solution, exit_code) + "\n")
    return exit_code
