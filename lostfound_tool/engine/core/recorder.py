"""
Match record persistence.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from ..models import Item, MatchRecord
from .client import DynamoDBStore
from .fanout import FanoutTask


def record_tasks(
    client: DynamoDBStore,
    source_item_id: str,
    candidates: list[Item],
    now: int,
) -> list[FanoutTask]:
    """One insert-if-absent task per candidate, ready for the fanout."""
    tasks: list[FanoutTask] = []
    for candidate in candidates:
        record = MatchRecord(
            source_item_id=source_item_id,
            candidate_item_id=candidate.id,
            created_at=now,
            notified=True,
        )

        def task(match: MatchRecord = record) -> str:
            return "recorded" if client.put_match_record(match) else "duplicate"

        tasks.append((candidate.id, "record", task))
    return tasks
