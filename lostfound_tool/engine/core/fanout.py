"""
Join-all task fanout with per-task error isolation.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from ..constants import FANOUT_MAX_WORKERS
from ..logging_config import get_logger
from ..models import FanoutOutcome

logger = get_logger(__name__)

# A task returns its status string ("sent", "recorded", "skipped", ...)
FanoutTask = tuple[str, str, Callable[[], str]]


def run_all(tasks: list[FanoutTask], max_workers: int = FANOUT_MAX_WORKERS) -> list[FanoutOutcome]:
    """
    Run every task concurrently and wait for all of them to settle.

    A task that raises is reported as a "failed" outcome; the others keep
    running. Outcomes are returned in task order.

    Args:
        tasks: (candidate_id, task_name, callable) triples
        max_workers: Thread pool size

    Returns:
        One outcome per task
    """
    if not tasks:
        return []

    with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks))) as pool:
        futures = [(candidate_id, name, pool.submit(fn)) for candidate_id, name, fn in tasks]

    outcomes: list[FanoutOutcome] = []
    for candidate_id, name, future in futures:
        error = future.exception()
        if error is not None:
            logger.error(f"{name} failed for candidate '{candidate_id}': {error}", exc_info=error)
            outcomes.append(FanoutOutcome(candidate_id, name, "failed", str(error)))
        else:
            outcomes.append(FanoutOutcome(candidate_id, name, future.result()))
    return outcomes
