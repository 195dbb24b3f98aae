"""
Type models for the matching engine.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ItemType(Enum):
    """Kinds of reported items."""

    LOST = "lost"
    FOUND = "found"

    @property
    def opposite(self) -> "ItemType":
        return ItemType.FOUND if self is ItemType.LOST else ItemType.LOST


class ResolutionType(Enum):
    """How an item was closed."""

    NONE = "none"
    MATCHED = "matched"
    EXPIRED = "expired"
    OTHER = "other"


@dataclass
class Item:
    """A reported lost or found object."""

    id: str
    owner_id: str
    type: ItemType
    category: str
    title: str
    latitude: float
    longitude: float
    description: str = ""
    is_resolved: bool = False
    resolution_type: ResolutionType = ResolutionType.NONE
    linked_match_id: str | None = None
    created_at: int = 0
    updated_at: int = 0
    resolved_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        data["resolution_type"] = self.resolution_type.value
        return data


@dataclass
class User:
    """Push destinations registered for a user."""

    id: str
    device_tokens: set[str] = field(default_factory=set)


@dataclass
class MatchRecord:
    """A discovered candidate pairing (audit trail, never mutated)."""

    source_item_id: str
    candidate_item_id: str
    created_at: int
    notified: bool = True


@dataclass
class ResolutionRecord:
    """A confirmed lost/found pairing."""

    item_id: str
    matched_item_id: str
    resolution_type: ResolutionType
    created_at: int
    resolved_by: str


@dataclass(frozen=True)
class Notification:
    """Push message handed to a notifier."""

    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class MulticastResult:
    """Per-token delivery summary for one send_multicast call."""

    success_count: int
    failure_count: int
    failed_tokens: tuple[str, ...] = ()


@dataclass(frozen=True)
class FanoutOutcome:
    """Result of one notify or record task for one candidate."""

    candidate_id: str
    task: str
    status: str
    error: str | None = None


@dataclass
class MatchRunResult:
    """Everything one item-created trigger produced."""

    item_id: str
    matches: list[Item]
    outcomes: list[FanoutOutcome]

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "matches": [m.id for m in self.matches],
            "outcomes": [asdict(o) for o in self.outcomes],
        }


@dataclass(frozen=True)
class SweepResult:
    """Summary of one retention sweep."""

    cutoff: int
    candidates: int
    expired: int
    failed_batches: int
