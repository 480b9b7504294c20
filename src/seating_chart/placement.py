"""Drag and drop placement rules.

A drop targets one seat. Single guests are assigned, swapped or blocked
depending on where the drag started; whole parties fill the empty seats of the
target table going round from the drop seat.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .repository import SeatingRepository

logger = logging.getLogger(__name__)


class DragSource(enum.Enum):
    """Where a dragged guest came from."""

    SIDEBAR = "sidebar"  # new placement
    CHAIR = "chair"  # relocation of a seated guest


@dataclass(frozen=True)
class GuestPayload:
    guest_id: str
    source: DragSource = DragSource.SIDEBAR


@dataclass(frozen=True)
class PartyPayload:
    party_id: str


def wraparound_empty_seats(seats: Sequence[Optional[str]], start_index: int) -> List[int]:
    """Empty seat indices in circular order starting at ``start_index``.

    For ``S`` seats the visiting order is ``start, start + 1, ..., S - 1, 0,
    ..., start - 1``; occupied seats are filled out.
    """
    count = len(seats)
    order = [(start_index + offset) % count for offset in range(count)]
    return [index for index in order if seats[index] is None]


def drop_guest(
    repository: SeatingRepository,
    guest_id: str,
    table_id: str,
    seat_index: int,
    source: DragSource = DragSource.SIDEBAR,
) -> bool:
    """Drop a single guest on a seat.

    An empty seat takes the guest. An occupied seat swaps with the occupant
    when the guest was dragged out of a chair and rejects the drop when the
    guest came from the sidebar. Returns True when seating changed.
    """
    table = repository.get_table(table_id)
    if table is None or repository.get_guest(guest_id) is None or not 0 <= seat_index < len(table.seats):
        return False
    occupant = table.seats[seat_index]
    if occupant is None:
        repository.assign_to_seat(guest_id, table_id, seat_index)
        return True
    if occupant == guest_id:
        return False
    if source is DragSource.CHAIR:
        if repository.get_guest_assignment(guest_id) is None:
            return False
        repository.swap_seats(guest_id, occupant)
        return True
    logger.debug("Blocked sidebar drop of %s onto occupied seat %s[%d]", guest_id, table.name, seat_index)
    return False


def drop_party(
    repository: SeatingRepository,
    party: Union[str, Sequence[str]],
    table_id: str,
    seat_index: int,
) -> List[str]:
    """Drop a whole party starting at an empty seat.

    ``party`` is a party id or the member ids in drop order. Members take the
    empty seats of the target table in wraparound order; members beyond the
    table's free seats keep their current seat or stay unassigned. Nothing
    spills to other tables. Returns the ids that were seated.
    """
    if isinstance(party, str):
        member_ids = [g.id for g in repository.get_guests_by_party(party)]
    else:
        member_ids = [gid for gid in party if repository.get_guest(gid) is not None]

    table = repository.get_table(table_id)
    if table is None or not member_ids or not 0 <= seat_index < len(table.seats):
        return []
    if table.seats[seat_index] is not None:
        logger.debug("Blocked party drop onto occupied seat %s[%d]", table.name, seat_index)
        return []

    free = wraparound_empty_seats(table.seats, seat_index)
    placed = member_ids[: len(free)]
    for guest_id, index in zip(placed, free):
        repository.assign_to_seat(guest_id, table_id, index)
    if len(member_ids) > len(placed):
        logger.info("%s has room for %d of %d party members", table.name, len(placed), len(member_ids))
    return placed


class PlacementResolver:
    """Turns drag and drop gestures into repository mutations."""

    def __init__(self, repository: SeatingRepository) -> None:
        self.repository = repository

    def drop(self, payload: Union[GuestPayload, PartyPayload], table_id: str, seat_index: int) -> bool:
        """Apply a drop. Returns True when any seat changed."""
        if isinstance(payload, PartyPayload):
            return bool(drop_party(self.repository, payload.party_id, table_id, seat_index))
        return drop_guest(self.repository, payload.guest_id, table_id, seat_index, payload.source)
