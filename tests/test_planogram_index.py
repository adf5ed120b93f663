"""
Tests for analysis/planogram_index.py

Covers: planogram scoping, bay listing (sorted, unparseable bays excluded but
records retained), in-bay ordering with stable ties, UPC and id lookups, and
delete-list scoping.
"""

from analysis.models import DeleteListEntry, PegAddress, PlacementRecord
from analysis.planogram_index import PlanogramIndex


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _record(upc: str, bay: int | None, position: int, pog: str = "P1",
            source_row: int = 0, raw_bay: str | None = None) -> PlacementRecord:
    bay_text = raw_bay if raw_bay is not None else str(bay)
    return PlacementRecord(
        planogram_id=pog,
        bay=bay_text,
        bay_number=bay,
        peg=PegAddress(1, 1),
        peg_raw="R1 C1",
        position=position,
        upc=upc,
        canonical_upc=upc,
        width_in=3.0,
        height_in=6.0,
        source_row=source_row,
        placement_id=f"{pog}|{bay_text}|{position}|{upc}|{source_row}",
    )


# ═══════════════════════════════════════════════════════════════════════════
# Scoping
# ═══════════════════════════════════════════════════════════════════════════

class TestScoping:
    def test_only_requested_planogram_kept(self):
        records = [_record("1", 1, 1, pog="P1"), _record("2", 1, 1, pog="P2")]
        index = PlanogramIndex.build(records, "P1")
        assert [r.upc for r in index.records] == ["1"]
        assert len(index) == 1

    def test_delete_entries_scoped(self):
        deletes = [
            DeleteListEntry("P1", "111", "111"),
            DeleteListEntry("P2", "222", "222"),
        ]
        index = PlanogramIndex.build([], "P1", deletes)
        assert [d.upc for d in index.delete_entries] == ["111"]

    def test_unknown_planogram_is_empty(self):
        index = PlanogramIndex.build([_record("1", 1, 1)], "NOPE")
        assert index.records == ()
        assert index.all_bays() == ()


# ═══════════════════════════════════════════════════════════════════════════
# Bays
# ═══════════════════════════════════════════════════════════════════════════

class TestBays:
    def test_bays_sorted_distinct(self):
        records = [_record("1", 3, 1), _record("2", 1, 1), _record("3", 3, 2), _record("4", 2, 1)]
        index = PlanogramIndex.build(records, "P1")
        assert index.all_bays() == (1, 2, 3)

    def test_unparseable_bay_excluded_but_retained(self):
        records = [_record("1", 1, 1), _record("2", None, 1, raw_bay="end cap")]
        index = PlanogramIndex.build(records, "P1")
        assert index.all_bays() == (1,)
        assert len(index.records) == 2

    def test_items_in_bay_sorted_by_position(self):
        records = [_record("c", 1, 3), _record("a", 1, 1), _record("b", 1, 2)]
        index = PlanogramIndex.build(records, "P1")
        assert [r.upc for r in index.items_in_bay(1)] == ["a", "b", "c"]

    def test_position_ties_keep_input_order(self):
        records = [
            _record("first", 1, 0, source_row=0),
            _record("second", 1, 0, source_row=1),
            _record("third", 1, 0, source_row=2),
        ]
        index = PlanogramIndex.build(records, "P1")
        assert [r.upc for r in index.items_in_bay(1)] == ["first", "second", "third"]

    def test_missing_bay_returns_empty(self):
        index = PlanogramIndex.build([_record("1", 1, 1)], "P1")
        assert index.items_in_bay(9) == ()


# ═══════════════════════════════════════════════════════════════════════════
# Lookups
# ═══════════════════════════════════════════════════════════════════════════

class TestLookups:
    def test_items_by_canonical_upc_returns_all_facings(self):
        records = [_record("999", 1, 1), _record("999", 2, 5), _record("1", 1, 2)]
        index = PlanogramIndex.build(records, "P1")
        assert len(index.items_by_canonical_upc("999")) == 2
        assert index.items_by_canonical_upc("404") == ()

    def test_find_by_placement_id(self):
        record = _record("999", 1, 1)
        index = PlanogramIndex.build([record], "P1")
        assert index.find_by_placement_id(record.placement_id) is record
        assert index.find_by_placement_id("missing") is None

    def test_find_position(self):
        records = [_record("a", 1, 1), _record("b", 1, 2), _record("c", 2, 2)]
        index = PlanogramIndex.build(records, "P1")
        assert index.find_position(1, 2).upc == "b"
        assert index.find_position(2, 2).upc == "c"
        assert index.find_position(1, 3) is None
