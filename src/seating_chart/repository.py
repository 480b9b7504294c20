"""In memory seating state and the mutations allowed on it.

Every operation is total: an unknown guest, table, party or relationship id
turns the call into a no-op instead of raising.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Tuple

from .auto_assign import auto_assign
from .models import (
    DEFAULT_COLOR,
    DuplicateGuest,
    Guest,
    GuestAssignment,
    Party,
    Relationship,
    Settings,
    Table,
    generate_id,
    generate_random_color,
    party_name,
)

logger = logging.getLogger(__name__)


def create_initial_tables(count: int, chair_count: int) -> List[Table]:
    """Build ``count`` empty tables named ``Table 1`` .. ``Table n``."""
    return [Table(id=generate_id(), name=f"Table {i + 1}", chair_count=chair_count) for i in range(count)]


class SeatingRepository:
    """Single source of truth for guests, parties and who sits where."""

    def __init__(
        self,
        guests: Optional[List[Guest]] = None,
        tables: Optional[List[Table]] = None,
        parties: Optional[List[Party]] = None,
        relationships: Optional[List[Relationship]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings: Settings = settings or Settings()
        self.guests: List[Guest] = list(guests or [])
        self.parties: List[Party] = list(parties or [])
        self.relationships: List[Relationship] = list(relationships or [])
        if tables is None:
            tables = create_initial_tables(self.settings.table_count, self.settings.default_chair_count)
        self.tables: List[Table] = list(tables)
        self.duplicates: List[DuplicateGuest] = []

    # ----------------------------- lookups -----------------------------
    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return next((g for g in self.guests if g.id == guest_id), None)

    def get_table(self, table_id: str) -> Optional[Table]:
        return next((t for t in self.tables if t.id == table_id), None)

    def get_party(self, party_id: str) -> Optional[Party]:
        return next((p for p in self.parties if p.id == party_id), None)

    def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        return next((r for r in self.relationships if r.id == relationship_id), None)

    def relationship_color(self, relationship_id: str) -> str:
        """Display color for a relationship, grey when unknown."""
        relationship = self.get_relationship(relationship_id)
        return relationship.color if relationship else DEFAULT_COLOR

    # ----------------------------- seats -----------------------------
    def _vacate(self, guest_ids: Iterable[str]) -> None:
        doomed = set(guest_ids)
        for table in self.tables:
            table.seats = [None if seat in doomed else seat for seat in table.seats]

    def assign_to_seat(self, guest_id: str, table_id: str, seat_index: int) -> None:
        """Move a guest into a seat, clearing whatever seat held it before.

        The destination is not checked for an occupant: a different guest
        sitting there is overwritten and becomes unassigned. Callers decide
        between assign, swap and block before calling this.
        """
        table = self.get_table(table_id)
        if table is None or not 0 <= seat_index < len(table.seats) or self.get_guest(guest_id) is None:
            logger.debug("Ignoring assignment of %s to seat %s[%s]", guest_id, table_id, seat_index)
            return
        self._vacate([guest_id])
        table.seats[seat_index] = guest_id

    def unassign_guest(self, guest_id: str) -> None:
        self._vacate([guest_id])

    def _locate(self, guest_id: str) -> Optional[Tuple[Table, int]]:
        for table in self.tables:
            index = table.seat_of(guest_id)
            if index is not None:
                return table, index
        return None

    def swap_seats(self, guest_id_a: str, guest_id_b: str) -> None:
        """Exchange the seats of two seated guests.

        Nothing moves unless both guests are currently seated.
        """
        seat_a = self._locate(guest_id_a)
        seat_b = self._locate(guest_id_b)
        if seat_a is None or seat_b is None:
            logger.debug("Swap of %s and %s skipped, both must be seated", guest_id_a, guest_id_b)
            return
        (table_a, index_a), (table_b, index_b) = seat_a, seat_b
        table_a.seats[index_a] = guest_id_b
        table_b.seats[index_b] = guest_id_a

    def update_table_chair_count(self, table_id: str, chair_count: int) -> None:
        """Resize a table. Guests in removed seats become unassigned."""
        table = self.get_table(table_id)
        if table is None:
            return
        chair_count = max(0, int(chair_count))
        current = len(table.seats)
        if chair_count > current:
            table.seats = table.seats + [None] * (chair_count - current)
        elif chair_count < current:
            dropped = [seat for seat in table.seats[chair_count:] if seat is not None]
            if dropped:
                logger.info("Shrinking %s unseats %d guest(s)", table.name, len(dropped))
            table.seats = table.seats[:chair_count]
        table.chair_count = chair_count

    def update_table_name(self, table_id: str, name: str) -> None:
        table = self.get_table(table_id)
        if table is not None:
            table.name = name

    def clear_all_seats(self) -> None:
        self.tables = [table.cleared() for table in self.tables]

    def auto_assign(self) -> None:
        """Replace every table's seating with a fresh automatic assignment."""
        self.tables = auto_assign(self.guests, self.tables, self.parties)

    # ----------------------------- queries -----------------------------
    def get_unassigned_guests(self) -> List[Guest]:
        seated = {seat for table in self.tables for seat in table.seats if seat is not None}
        return [g for g in self.guests if g.id not in seated]

    def get_assigned_guests(self) -> List[Tuple[Guest, GuestAssignment]]:
        """Every seated guest with its assignment, in table then seat order."""
        by_id = {g.id: g for g in self.guests}
        assigned: List[Tuple[Guest, GuestAssignment]] = []
        for table in self.tables:
            for index, seat in enumerate(table.seats):
                if seat is None or seat not in by_id:
                    continue
                assigned.append(
                    (by_id[seat], GuestAssignment(guest_id=seat, table_id=table.id, table_name=table.name, seat_index=index))
                )
        return assigned

    def get_guest_assignment(self, guest_id: str) -> Optional[GuestAssignment]:
        found = self._locate(guest_id)
        if found is None:
            return None
        table, index = found
        return GuestAssignment(guest_id=guest_id, table_id=table.id, table_name=table.name, seat_index=index)

    def is_table_over_capacity(self, table_id: str) -> bool:
        table = self.get_table(table_id)
        if table is None:
            return False
        return table.occupied > table.chair_count

    def get_guests_by_party(self, party_id: str) -> List[Guest]:
        party = self.get_party(party_id)
        if party is None:
            return []
        by_id = {g.id: g for g in self.guests}
        return [by_id[gid] for gid in party.guest_ids if gid in by_id]

    # ----------------------------- guests -----------------------------
    def _build_guest(
        self, first_name: str, last_name: str, party_size: int, relationship_id: str
    ) -> Tuple[List[Guest], Optional[Party]]:
        """Create a main guest plus generated companions and their party."""
        party_size = max(1, int(party_size))
        main = Guest(
            id=generate_id(),
            first_name=first_name,
            last_name=last_name,
            party_size=party_size,
            relationship_id=relationship_id,
        )
        if party_size == 1:
            return [main], None

        party = Party(id=generate_id(), name=party_name(first_name, last_name), guest_ids=[main.id])
        main.party_id = party.id
        created = [main]
        for i in range(1, party_size):
            companion = Guest(
                id=generate_id(),
                first_name=f"{first_name} {last_name}'s Guest",
                last_name=str(i),
                relationship_id=relationship_id,
                party_id=party.id,
                is_main_guest=False,
                parent_guest_id=main.id,
            )
            created.append(companion)
            party.guest_ids.append(companion.id)
        return created, party

    def add_guest(self, first_name: str, last_name: str, party_size: int = 1, relationship_id: str = "") -> str:
        """Add a guest and, for party sizes above one, their companions.

        Returns the id of the main guest.
        """
        created, party = self._build_guest(first_name, last_name, party_size, relationship_id)
        self.guests.extend(created)
        if party is not None:
            self.parties.append(party)
        return created[0].id

    def update_guest(self, guest_id: str, **changes: object) -> None:
        """Update plain guest fields. Party membership and size are not editable here."""
        guest = self.get_guest(guest_id)
        if guest is None:
            return
        for name in ("first_name", "last_name", "relationship_id"):
            if name in changes:
                setattr(guest, name, changes[name])

    def _remove_guests(self, guest_ids: Iterable[str]) -> None:
        doomed = set(guest_ids)
        self._vacate(doomed)
        for party in self.parties:
            party.guest_ids = [gid for gid in party.guest_ids if gid not in doomed]
        self.parties = [p for p in self.parties if p.guest_ids]
        self.guests = [g for g in self.guests if g.id not in doomed]

    def delete_guest(self, guest_id: str) -> None:
        """Delete a guest. Deleting a main guest removes their whole party."""
        guest = self.get_guest(guest_id)
        if guest is None:
            return
        doomed = [guest_id]
        if guest.is_main_guest and guest.party_id:
            party = self.get_party(guest.party_id)
            if party is not None:
                doomed = list(party.guest_ids)
        self._remove_guests(doomed)

    def import_guests(self, records: Iterable[Mapping[str, object]]) -> List[str]:
        """Add already validated guest records.

        Records whose first and last name match an existing guest are still
        imported but also recorded in ``duplicates`` for later resolution.
        Returns the ids of the new main guests.
        """
        existing = {(g.first_name.lower(), g.last_name.lower()) for g in self.guests}
        main_ids: List[str] = []
        for record in records:
            first_name = str(record.get("first_name", "")).strip()
            last_name = str(record.get("last_name", "")).strip()
            relationship_id = str(record.get("relationship_id", ""))
            if (first_name.lower(), last_name.lower()) in existing:
                relationship = self.get_relationship(relationship_id)
                self.duplicates.append(
                    DuplicateGuest(
                        id=generate_id(),
                        first_name=first_name,
                        last_name=last_name,
                        relationship=relationship.name if relationship else "",
                    )
                )
            main_ids.append(self.add_guest(first_name, last_name, int(record.get("party_size", 1)), relationship_id))
        return main_ids

    def resolve_duplicate(self, duplicate_id: str, action: str) -> None:
        """Dismiss a duplicate, deleting the matching guest when ``action`` is ``"remove"``."""
        duplicate = next((d for d in self.duplicates if d.id == duplicate_id), None)
        if duplicate is None:
            return
        if action == "remove":
            # The most recently added match is the imported copy
            for guest in reversed(self.guests):
                relationship = self.get_relationship(guest.relationship_id)
                if (
                    guest.first_name == duplicate.first_name
                    and guest.last_name == duplicate.last_name
                    and (relationship.name if relationship else "") == duplicate.relationship
                ):
                    self.delete_guest(guest.id)
                    break
        self.duplicates = [d for d in self.duplicates if d.id != duplicate_id]

    # ----------------------------- relationships -----------------------------
    def add_relationship(self, name: str, color: Optional[str] = None) -> str:
        relationship = Relationship(id=generate_id(), name=name, color=color or generate_random_color())
        self.relationships.append(relationship)
        return relationship.id

    def update_relationship(self, relationship_id: str, name: Optional[str] = None, color: Optional[str] = None) -> None:
        relationship = self.get_relationship(relationship_id)
        if relationship is None:
            return
        if name is not None:
            relationship.name = name
        if color is not None:
            relationship.color = color

    def delete_relationship(self, relationship_id: str) -> bool:
        """Delete a relationship. Returns False while any guest still uses it."""
        if any(g.relationship_id == relationship_id for g in self.guests):
            return False
        self.relationships = [r for r in self.relationships if r.id != relationship_id]
        return True

    # ----------------------------- parties -----------------------------
    def _leave_party(self, guest: Guest) -> None:
        if guest.party_id:
            party = self.get_party(guest.party_id)
            if party is not None:
                party.guest_ids = [gid for gid in party.guest_ids if gid != guest.id]
                if not party.guest_ids:
                    self.parties.remove(party)
        guest.party_id = None

    def _join_party(self, guest: Guest, party: Party) -> None:
        if guest.party_id == party.id:
            return
        self._leave_party(guest)
        party.guest_ids.append(guest.id)
        guest.party_id = party.id

    def create_party(self, name: str, guest_ids: Iterable[str] = ()) -> str:
        """Create a party from existing guests, moving them out of any old party.

        An empty party is kept until it gets a member or is deleted.
        """
        party = Party(id=generate_id(), name=name)
        self.parties.append(party)
        for guest_id in guest_ids:
            guest = self.get_guest(guest_id)
            if guest is not None:
                self._join_party(guest, party)
        return party.id

    def rename_party(self, party_id: str, name: str) -> None:
        party = self.get_party(party_id)
        if party is not None:
            party.name = name

    def delete_party(self, party_id: str, delete_guests: bool = False) -> None:
        """Delete a party, either with its guests or leaving them as solo guests."""
        party = self.get_party(party_id)
        if party is None:
            return
        if delete_guests:
            self._remove_guests(party.guest_ids)
        else:
            for guest in self.guests:
                if guest.party_id == party_id:
                    guest.party_id = None
        self.parties = [p for p in self.parties if p.id != party_id]

    def add_to_party(self, party_id: str, guest_id: str) -> None:
        party = self.get_party(party_id)
        guest = self.get_guest(guest_id)
        if party is None or guest is None:
            return
        self._join_party(guest, party)

    def remove_from_party(self, party_id: str, guest_id: str) -> None:
        guest = self.get_guest(guest_id)
        if guest is None or guest.party_id != party_id:
            return
        self._leave_party(guest)

    def update_guest_party(self, guest_id: str, party_id: Optional[str]) -> None:
        """Move a guest into another party, or make them solo with ``None``."""
        guest = self.get_guest(guest_id)
        if guest is None:
            return
        if party_id is None:
            self._leave_party(guest)
            return
        party = self.get_party(party_id)
        if party is not None:
            self._join_party(guest, party)

    def add_guest_to_party(self, party_id: str) -> str:
        """Generate one more companion for a party's main guest.

        Returns the new guest id, or ``""`` when the party has no main guest.
        """
        party = self.get_party(party_id)
        if party is None:
            return ""
        members = self.get_guests_by_party(party_id)
        main = next((g for g in members if g.is_main_guest), None)
        if main is None:
            return ""
        number = sum(1 for g in members if not g.is_main_guest) + 1
        companion = Guest(
            id=generate_id(),
            first_name=f"{main.first_name} {main.last_name}'s Guest",
            last_name=str(number),
            relationship_id=main.relationship_id,
            party_id=party.id,
            is_main_guest=False,
            parent_guest_id=main.id,
        )
        self.guests.append(companion)
        party.guest_ids.append(companion.id)
        return companion.id

    # ----------------------------- settings -----------------------------
    def update_settings(self, table_count: Optional[int] = None, default_chair_count: Optional[int] = None) -> None:
        """Change settings. A new table count adds or drops tables at the end."""
        if default_chair_count is not None:
            self.settings.default_chair_count = max(0, int(default_chair_count))
        if table_count is None:
            return
        table_count = max(0, int(table_count))
        self.settings.table_count = table_count
        current = len(self.tables)
        if table_count > current:
            self.tables.extend(
                Table(id=generate_id(), name=f"Table {current + i + 1}", chair_count=self.settings.default_chair_count)
                for i in range(table_count - current)
            )
        elif table_count < current:
            self.tables = self.tables[:table_count]

    def clear_all(self) -> None:
        """Reset to an empty guest list and default tables."""
        self.settings = Settings()
        self.guests = []
        self.parties = []
        self.relationships = []
        self.duplicates = []
        self.tables = create_initial_tables(self.settings.table_count, self.settings.default_chair_count)
