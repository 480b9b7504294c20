"""
Relationship aware automatic seat assignment.

Guests are grouped by relationship and the groups are seated largest first,
walking a cursor forward through the tables:
    - a party is never split while the table under the cursor has room for it,
    - a party that does not fit moves the cursor on to the next table,
    - once a group is done the cursor moves to a fresh table so different
      relationships share a table only when they have to.
Guests that do not fit anywhere are left unassigned.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .models import Guest, Party, Table

logger = logging.getLogger(__name__)


@dataclass
class RelationshipGroup:
    """Guests sharing a relationship id and the seats they need."""

    relationship_id: str
    guests: List[Guest] = field(default_factory=list)

    @property
    def total_seats(self) -> int:
        return sum(g.party_size for g in self.guests if g.is_main_guest)


def group_by_relationship(guests: Iterable[Guest]) -> List[RelationshipGroup]:
    """Partition guests by relationship, largest seat demand first.

    The sort is stable so ties keep the order relationships were first seen.
    """
    groups: Dict[str, RelationshipGroup] = {}
    for guest in guests:
        groups.setdefault(guest.relationship_id, RelationshipGroup(guest.relationship_id)).guests.append(guest)
    return sorted(groups.values(), key=lambda g: g.total_seats, reverse=True)


class _Cursor:
    """Forward only position over the tables being filled."""

    def __init__(self, tables: List[Table]) -> None:
        self.tables = tables
        self.table_index = 0
        self.seat_index = 0

    @property
    def table(self) -> Optional[Table]:
        if self.table_index < len(self.tables):
            return self.tables[self.table_index]
        return None

    def next_table(self) -> None:
        self.table_index += 1
        self.seat_index = 0

    def fill_current(self, members: List[Guest]) -> None:
        """Seat every member at the cursor table, wrapping inside that table only."""
        table = self.tables[self.table_index]
        count = len(table.seats)
        for member in members:
            for offset in range(count):
                index = (self.seat_index + offset) % count
                if table.seats[index] is None:
                    table.seats[index] = member.id
                    self.seat_index = index + 1
                    break

    def spill(self, members: List[Guest]) -> List[Guest]:
        """Seat members in the next empty seats from the cursor onwards.

        Returns the members that found no seat.
        """
        remaining = list(members)
        while remaining and self.table is not None:
            table = self.table
            while remaining and self.seat_index < len(table.seats):
                if table.seats[self.seat_index] is None:
                    table.seats[self.seat_index] = remaining.pop(0).id
                self.seat_index += 1
            if remaining:
                self.next_table()
        return remaining


def _party_members(guest: Guest, parties: Dict[str, Party], guests_by_id: Dict[str, Guest]) -> List[Guest]:
    """The guest's whole party in member order, or just the guest."""
    party = parties.get(guest.party_id) if guest.party_id else None
    if party is None:
        return [guest]
    members = [guests_by_id[gid] for gid in party.guest_ids if gid in guests_by_id]
    if guest.id not in party.guest_ids:
        members.insert(0, guest)
    return members


def auto_assign(guests: List[Guest], tables: List[Table], parties: List[Party]) -> List[Table]:
    """Compute a fresh seating for every guest.

    Existing seat contents are ignored and the input tables are left untouched;
    the returned tables are copies with the same ids, names and chair counts.
    """
    cleared = [table.cleared() for table in tables]
    if not cleared:
        return cleared

    parties_by_id = {p.id: p for p in parties}
    guests_by_id = {g.id: g for g in guests}
    cursor = _Cursor(cleared)
    placed: Set[str] = set()
    unplaced: List[Guest] = []

    for group in group_by_relationship(guests):
        for guest in group.guests:
            if guest.id in placed:
                continue
            members = [m for m in _party_members(guest, parties_by_id, guests_by_id) if m.id not in placed]
            placed.update(m.id for m in members)

            table = cursor.table
            if table is not None and table.empty_seats >= len(members):
                cursor.fill_current(members)
                continue

            cursor.next_table()
            table = cursor.table
            if table is not None and table.empty_seats >= len(members):
                cursor.fill_current(members)
            else:
                unplaced.extend(cursor.spill(members))

        # Start the next relationship at a fresh table
        table = cursor.table
        if table is not None and table.occupied > 0:
            cursor.next_table()

    for guest in unplaced:
        logger.debug("No seat left for guest %s (%s)", guest.id, guest.full_name)
    logger.info(
        "Auto assign seated %d of %d guests at %d tables",
        len(guests) - len(unplaced),
        len(guests),
        len(cleared),
    )
    return cleared
