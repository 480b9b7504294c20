"""Data models for the seating chart."""
from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_COLOR = "#888"

PALETTE = [
    "#ef4444",  # red
    "#f97316",  # orange
    "#f59e0b",  # amber
    "#eab308",  # yellow
    "#84cc16",  # lime
    "#22c55e",  # green
    "#10b981",  # emerald
    "#14b8a6",  # teal
    "#06b6d4",  # cyan
    "#0ea5e9",  # sky
    "#3b82f6",  # blue
    "#6366f1",  # indigo
    "#8b5cf6",  # violet
    "#a855f7",  # purple
    "#d946ef",  # fuchsia
    "#ec4899",  # pink
    "#f43f5e",  # rose
]


def generate_id() -> str:
    """Return a new unique identifier."""
    return uuid.uuid4().hex


def generate_random_color() -> str:
    """Pick a display color for a new relationship."""
    return random.choice(PALETTE)


def party_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}'s Party"


@dataclass
class Guest:
    """Representation of a wedding guest.

    Generated companions ("+1" guests) are plain guests with
    ``is_main_guest=False`` and ``parent_guest_id`` pointing back at the guest
    who owns the party.
    """

    id: str
    first_name: str
    last_name: str
    party_size: int = 1
    relationship_id: str = ""
    party_id: Optional[str] = None
    is_main_guest: bool = True
    parent_guest_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Relationship:
    """User defined category such as "Family" or "Friends"."""

    id: str
    name: str
    color: str = DEFAULT_COLOR


@dataclass
class Party:
    """Named cluster of guests that should be seated together."""

    id: str
    name: str
    guest_ids: List[str] = field(default_factory=list)


@dataclass
class Table:
    """Round table with a fixed number of chairs.

    ``seats`` holds a guest id or ``None`` per chair. When omitted it is
    filled with ``chair_count`` empty seats.
    """

    id: str
    name: str
    chair_count: int
    seats: List[Optional[str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.seats:
            self.seats = [None] * self.chair_count

    @property
    def occupied(self) -> int:
        return sum(1 for seat in self.seats if seat is not None)

    @property
    def empty_seats(self) -> int:
        return sum(1 for seat in self.seats if seat is None)

    def seat_of(self, guest_id: str) -> Optional[int]:
        """Index of the seat holding ``guest_id``, if any."""
        for index, seat in enumerate(self.seats):
            if seat == guest_id:
                return index
        return None

    def cleared(self) -> Table:
        """Copy of this table with every seat empty."""
        return Table(id=self.id, name=self.name, chair_count=self.chair_count, seats=[None] * self.chair_count)


@dataclass(frozen=True)
class GuestAssignment:
    """Where a guest sits."""

    guest_id: str
    table_id: str
    table_name: str
    seat_index: int


@dataclass
class Settings:
    """Repository configuration."""

    table_count: int = 10
    default_chair_count: int = 10


@dataclass
class DuplicateGuest:
    """An imported guest whose name matched an existing guest."""

    id: str
    first_name: str
    last_name: str
    relationship: str = ""
