"""
Tests for analysis/navigator.py

Covers: bay clamping (no wraparound), match cursor wraparound, bay switch
before highlight, and next-item sequencing within a bay.
"""

from analysis.models import PegAddress, PlacementRecord
from analysis.navigator import (
    BayNavigator,
    CursorState,
    MatchCursor,
    next_item,
    select_match,
)
from analysis.planogram_index import PlanogramIndex


def _record(upc: str, bay: int | None, position: int) -> PlacementRecord:
    return PlacementRecord(
        planogram_id="P1",
        bay=str(bay),
        bay_number=bay,
        peg=PegAddress(1, 1),
        peg_raw="R1 C1",
        position=position,
        upc=upc,
        canonical_upc=upc,
        width_in=3.0,
        height_in=6.0,
        placement_id=f"P1|{bay}|{position}|{upc}",
    )


# ═══════════════════════════════════════════════════════════════════════════
# BayNavigator
# ═══════════════════════════════════════════════════════════════════════════

class TestBayNavigator:
    def test_starts_on_first_bay(self):
        nav = BayNavigator((1, 2, 3))
        assert nav.current_bay == 1
        assert nav.bay_label() == "Bay 1 of 3"

    def test_clamps_at_start(self):
        nav = BayNavigator((1, 2, 3))
        assert nav.change_bay(-1) is False
        assert nav.current_bay == 1

    def test_clamps_at_end(self):
        nav = BayNavigator((1, 2, 3))
        nav.change_bay(1)
        nav.change_bay(1)
        assert nav.change_bay(1) is False
        assert nav.current_bay == 3
        assert nav.bay_label() == "Bay 3 of 3"

    def test_large_step_clamped(self):
        nav = BayNavigator((4, 8, 12))
        assert nav.change_bay(10) is True
        assert nav.current_bay == 12

    def test_non_contiguous_bays(self):
        nav = BayNavigator((2, 5, 9))
        nav.change_bay(1)
        assert nav.current_bay == 5
        assert nav.bay_position == 1

    def test_go_to_bay(self):
        nav = BayNavigator((1, 2, 3))
        assert nav.go_to_bay(3) is True
        assert nav.current_bay == 3
        assert nav.go_to_bay(3) is False
        assert nav.go_to_bay(42) is False
        assert nav.current_bay == 3

    def test_empty(self):
        nav = BayNavigator(())
        assert nav.current_bay is None
        assert nav.change_bay(1) is False
        assert nav.bay_label() == "No bays"


# ═══════════════════════════════════════════════════════════════════════════
# MatchCursor
# ═══════════════════════════════════════════════════════════════════════════

class TestMatchCursor:
    def test_states(self):
        assert MatchCursor().state is CursorState.NO_MATCH
        assert MatchCursor([_record("a", 1, 1)]).state is CursorState.SINGLE
        assert MatchCursor([_record("a", 1, 1), _record("a", 2, 1)]).state is CursorState.MULTI

    def test_advance_wraps_forward(self):
        records = [_record("a", 1, 1), _record("a", 2, 1), _record("a", 3, 1)]
        cursor = MatchCursor(records)
        cursor.advance(1)
        cursor.advance(1)
        assert cursor.advance(1) is records[0]
        assert cursor.label() == "Match 1 of 3"

    def test_advance_wraps_backward(self):
        records = [_record("a", 1, 1), _record("a", 2, 1), _record("a", 3, 1)]
        cursor = MatchCursor(records)
        assert cursor.advance(-1) is records[2]
        assert cursor.label() == "Match 3 of 3"

    def test_advance_without_matches(self):
        cursor = MatchCursor()
        assert cursor.advance(1) is None
        assert cursor.current is None
        assert cursor.label() == ""

    def test_jump_to(self):
        records = [_record("a", 1, 1), _record("a", 2, 1)]
        cursor = MatchCursor(records)
        assert cursor.jump_to(3) is records[1]
        assert cursor.index == 1


# ═══════════════════════════════════════════════════════════════════════════
# select_match
# ═══════════════════════════════════════════════════════════════════════════

class TestSelectMatch:
    def test_switches_bay_then_highlights(self):
        nav = BayNavigator((1, 2, 3))
        target = _record("999", 3, 4)
        step = select_match(MatchCursor([target]), nav)
        assert step.bay_changed is True
        assert step.bay == 3
        assert nav.current_bay == 3
        assert step.highlight_placement_id == target.placement_id

    def test_same_bay_no_switch(self):
        nav = BayNavigator((1, 2))
        step = select_match(MatchCursor([_record("999", 1, 2)]), nav)
        assert step.bay_changed is False
        assert step.bay == 1

    def test_unparseable_bay_keeps_current(self):
        nav = BayNavigator((1, 2))
        nav.change_bay(1)
        target = _record("999", None, 1)
        step = select_match(MatchCursor([target]), nav)
        assert step.bay == 2
        assert step.bay_changed is False
        assert step.highlight_placement_id == target.placement_id

    def test_empty_cursor(self):
        step = select_match(MatchCursor(), BayNavigator((1,)))
        assert step.highlight_placement_id is None
        assert step.bay == 1


# ═══════════════════════════════════════════════════════════════════════════
# next_item
# ═══════════════════════════════════════════════════════════════════════════

class TestNextItem:
    def test_returns_next_position_in_bay(self):
        records = [_record("a", 1, 1), _record("b", 1, 2), _record("c", 2, 3)]
        index = PlanogramIndex.build(records, "P1")
        assert next_item(index, records[0]).upc == "b"

    def test_none_at_end_of_bay(self):
        records = [_record("a", 1, 1), _record("b", 1, 2), _record("c", 2, 3)]
        index = PlanogramIndex.build(records, "P1")
        assert next_item(index, records[1]) is None

    def test_gap_in_positions_ends_sequence(self):
        records = [_record("a", 1, 1), _record("b", 1, 3)]
        index = PlanogramIndex.build(records, "P1")
        assert next_item(index, records[0]) is None

    def test_unparseable_bay(self):
        record = _record("a", None, 1)
        index = PlanogramIndex.build([record], "P1")
        assert next_item(index, record) is None
