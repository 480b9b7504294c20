"""Tabular views of the seating state for display."""
from __future__ import annotations

import pandas as pd

from .repository import SeatingRepository

ASSIGNMENT_COLUMNS = ["guest_id", "guest", "relationship", "table_id", "table", "seat"]
SUMMARY_COLUMNS = ["table_id", "table", "chairs", "seated", "open", "over_capacity"]
UNASSIGNED_COLUMNS = ["guest_id", "guest", "relationship", "party"]


def _relationship_name(repository: SeatingRepository, relationship_id: str) -> str:
    relationship = repository.get_relationship(relationship_id)
    return relationship.name if relationship else relationship_id


def assignments_frame(repository: SeatingRepository) -> pd.DataFrame:
    """One row per seated guest in table then seat order. Seats are 1-based."""
    rows = [
        {
            "guest_id": guest.id,
            "guest": guest.full_name,
            "relationship": _relationship_name(repository, guest.relationship_id),
            "table_id": assignment.table_id,
            "table": assignment.table_name,
            "seat": assignment.seat_index + 1,
        }
        for guest, assignment in repository.get_assigned_guests()
    ]
    return pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)


def table_summary_frame(repository: SeatingRepository) -> pd.DataFrame:
    """Occupancy per table, flagging tables seated beyond their chair count."""
    rows = []
    for table in repository.tables:
        seated = table.occupied
        rows.append(
            {
                "table_id": table.id,
                "table": table.name,
                "chairs": table.chair_count,
                "seated": seated,
                "open": max(0, table.chair_count - seated),
                "over_capacity": repository.is_table_over_capacity(table.id),
            }
        )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def unassigned_frame(repository: SeatingRepository) -> pd.DataFrame:
    """Guests without a seat, with the party they travel with."""
    rows = []
    for guest in repository.get_unassigned_guests():
        party = repository.get_party(guest.party_id) if guest.party_id else None
        rows.append(
            {
                "guest_id": guest.id,
                "guest": guest.full_name,
                "relationship": _relationship_name(repository, guest.relationship_id),
                "party": party.name if party else "",
            }
        )
    return pd.DataFrame(rows, columns=UNASSIGNED_COLUMNS)
