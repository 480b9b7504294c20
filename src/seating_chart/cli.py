"""Command line interface for the seating chart."""
from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Sequence

from .models import Settings
from .reporting import assignments_frame, table_summary_frame, unassigned_frame
from .repository import SeatingRepository


def party_size(value: str) -> int:
    size = int(value)
    if size < 1:
        raise argparse.ArgumentTypeError(f"party size must be at least 1: {value}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wedding seating chart auto assignment")
    parser.add_argument("--tables", type=int, default=Settings.table_count,
                        help="Number of tables.")
    parser.add_argument("--chairs", type=int, default=Settings.default_chair_count,
                        help="Chairs per table.")
    parser.add_argument("--guest", nargs=4, action="append", default=[],
                        metavar=("RELATIONSHIP", "FIRST", "LAST", "PARTY_SIZE"),
                        help="Add a guest. Repeat for every guest.")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log placement decisions.")
    return parser


def build_repository(tables: int, chairs: int, guests: List[List[str]]) -> SeatingRepository:
    """Create a repository holding the given guests and empty tables."""
    repository = SeatingRepository(settings=Settings(table_count=tables, default_chair_count=chairs))
    relationship_ids: Dict[str, str] = {}
    for relationship, first, last, size in guests:
        if relationship not in relationship_ids:
            relationship_ids[relationship] = repository.add_relationship(relationship)
        repository.add_guest(first, last, party_size(size), relationship_ids[relationship])
    return repository


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point used by ``seating-chart`` and ``python -m seating_chart.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        repository = build_repository(args.tables, args.chairs, args.guest)
    except (ValueError, argparse.ArgumentTypeError) as exc:
        parser.error(str(exc))
    repository.auto_assign()

    seating = assignments_frame(repository)
    if seating.empty:
        print("No guests seated.")
    else:
        print(seating.drop(columns=["guest_id", "table_id"]).to_string(index=False))

    # Compact per table summary
    for row in table_summary_frame(repository).itertuples(index=False):
        flag = " OVER" if row.over_capacity else ""
        print(f"[REPORT] {row.table} seated={row.seated}/{row.chairs} open={row.open}{flag}")

    unassigned = unassigned_frame(repository)
    for row in unassigned.itertuples(index=False):
        print(f"[UNASSIGNED] {row.guest} ({row.relationship})")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
