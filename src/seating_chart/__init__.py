"""Wedding seating chart package."""
from .models import Guest, Party, Relationship, Table, GuestAssignment, Settings
from .auto_assign import auto_assign
from .repository import SeatingRepository
from .placement import (
    DragSource,
    GuestPayload,
    PartyPayload,
    PlacementResolver,
    drop_guest,
    drop_party,
    wraparound_empty_seats,
)

__all__ = [
    "Guest",
    "Party",
    "Relationship",
    "Table",
    "GuestAssignment",
    "Settings",
    "auto_assign",
    "SeatingRepository",
    "DragSource",
    "GuestPayload",
    "PartyPayload",
    "PlacementResolver",
    "drop_guest",
    "drop_party",
    "wraparound_empty_seats",
]
