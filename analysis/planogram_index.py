"""
Planogram index — the in-memory view of one planogram's placement records.

Built once per store selection from the full record set and consumed by the
matching engine, the completion tracker, and the layout renderer.  The index
is write-once: nothing mutates it after build().

Ordering rules:
  - all_bays(): distinct parseable bay numbers, ascending.  Records with an
    unparseable bay are left out of the bay list but stay in `records`, so
    planogram totals remain consistent.
  - items_in_bay(): position ascending (0 when unparseable), ties stable by
    original input order.
"""

import logging
from collections import defaultdict
from typing import Iterable

from analysis.models import DeleteListEntry, PlacementRecord

logger = logging.getLogger(__name__)


class PlanogramIndex:
    """Read-only lookups over the records of a single planogram."""

    def __init__(
        self,
        planogram_id: str,
        records: list[PlacementRecord],
        delete_entries: list[DeleteListEntry],
    ) -> None:
        self.planogram_id = planogram_id
        self._records = tuple(records)
        self._delete_entries = tuple(delete_entries)

        by_bay: dict[int, list[PlacementRecord]] = defaultdict(list)
        by_upc: dict[str, list[PlacementRecord]] = defaultdict(list)
        by_id: dict[str, PlacementRecord] = {}

        for record in self._records:
            if record.bay_number is not None:
                by_bay[record.bay_number].append(record)
            by_upc[record.canonical_upc].append(record)
            by_id[record.placement_id] = record

        # sorted() is stable, so equal positions keep input order
        self._by_bay = {
            bay: tuple(sorted(items, key=lambda r: r.position))
            for bay, items in by_bay.items()
        }
        self._by_upc = {upc: tuple(items) for upc, items in by_upc.items()}
        self._by_id = by_id
        self._bays = tuple(sorted(self._by_bay))

    @classmethod
    def build(
        cls,
        records: Iterable[PlacementRecord],
        planogram_id: str,
        delete_entries: Iterable[DeleteListEntry] = (),
    ) -> "PlanogramIndex":
        """
        Build the index for *planogram_id* from the full record set.

        Records and delete-list entries belonging to other planograms are
        ignored.
        """
        scoped_records = [r for r in records if r.planogram_id == planogram_id]
        scoped_deletes = [d for d in delete_entries if d.planogram_id == planogram_id]

        index = cls(planogram_id, scoped_records, scoped_deletes)
        logger.info(
            f"Indexed planogram '{planogram_id}': {len(scoped_records)} placements "
            f"across {len(index.all_bays())} bays, "
            f"{len(scoped_deletes)} delete-list entries"
        )
        return index

    # ── Records ─────────────────────────────────────────────────────────

    @property
    def records(self) -> tuple[PlacementRecord, ...]:
        """Every record of the planogram in input order, valid bay or not."""
        return self._records

    @property
    def delete_entries(self) -> tuple[DeleteListEntry, ...]:
        return self._delete_entries

    def __len__(self) -> int:
        return len(self._records)

    # ── Lookups ─────────────────────────────────────────────────────────

    def all_bays(self) -> tuple[int, ...]:
        return self._bays

    def items_in_bay(self, bay: int) -> tuple[PlacementRecord, ...]:
        return self._by_bay.get(bay, ())

    def items_by_canonical_upc(self, canonical_upc: str) -> tuple[PlacementRecord, ...]:
        return self._by_upc.get(canonical_upc, ())

    def find_by_placement_id(self, placement_id: str) -> PlacementRecord | None:
        return self._by_id.get(placement_id)

    def find_position(self, bay: int, position: int) -> PlacementRecord | None:
        """First record (in bay order) at *position* within *bay*."""
        for record in self.items_in_bay(bay):
            if record.position == position:
                return record
        return None
