"""
Tests for processing/record_parser.py

Covers: default substitution (peg, width, height, bay, position), row
rejection, placement id uniqueness for duplicate rows, and the delete-list
and store-mapping parsers.
"""

import pandas as pd
import pytest

from analysis.models import PegAddress
from processing.record_parser import (
    parse_delete_rows,
    parse_int,
    parse_placement_rows,
    parse_store_rows,
)


def _planogram(rows: list[dict]) -> pd.DataFrame:
    columns = ["POG", "Bay", "Peg", "Position", "UPC", "Width", "Height", "Description"]
    return pd.DataFrame(rows, columns=columns).fillna("")


def _row(**overrides) -> dict:
    row = {
        "POG": "P1", "Bay": "1", "Peg": "R2 C3", "Position": "1",
        "UPC": "0012345", "Width": "4", "Height": "5", "Description": "Widget",
    }
    row.update(overrides)
    return row


# ═══════════════════════════════════════════════════════════════════════════
# Placement rows
# ═══════════════════════════════════════════════════════════════════════════

class TestParsePlacementRows:
    def test_clean_row(self):
        result = parse_placement_rows(_planogram([_row()]))
        record = result.records[0]

        assert record.planogram_id == "P1"
        assert record.bay_number == 1
        assert record.peg == PegAddress(2, 3)
        assert record.position == 1
        assert record.upc == "0012345"
        assert record.canonical_upc == "12345"
        assert record.width_in == 4.0
        assert record.height_in == 5.0
        assert record.description == "Widget"
        assert record.placement_id == "P1|1|1|12345"
        assert result.defaulted == []
        assert result.rejected_rows == []

    def test_bad_peg_defaults_to_top_left(self):
        result = parse_placement_rows(_planogram([_row(Peg="top shelf")]))
        assert result.records[0].peg == PegAddress(1, 1)
        assert result.records[0].peg_raw == "top shelf"
        assert [d["column"] for d in result.defaulted] == ["Peg"]

    def test_blank_dimensions_default(self):
        result = parse_placement_rows(_planogram([_row(Width="", Height="abc")]))
        record = result.records[0]
        assert (record.width_in, record.height_in) == (3.0, 6.0)
        assert {d["column"] for d in result.defaulted} == {"Width", "Height"}

    def test_dimension_with_unit(self):
        result = parse_placement_rows(_planogram([_row(Width='2.5"', Height="7 in")]))
        record = result.records[0]
        assert (record.width_in, record.height_in) == (2.5, 7.0)
        assert result.defaulted == []

    def test_unparseable_bay_kept_without_number(self):
        result = parse_placement_rows(_planogram([_row(Bay="end cap")]))
        record = result.records[0]
        assert record.bay == "end cap"
        assert record.bay_number is None
        assert not record.has_valid_bay
        assert record.placement_id == "P1|end cap|1|12345"

    def test_position_defaults_to_zero(self):
        result = parse_placement_rows(_planogram([_row(Position="")]))
        assert result.records[0].position == 0
        assert [d["column"] for d in result.defaulted] == ["Position"]

    @pytest.mark.parametrize("missing", ["POG", "UPC"])
    def test_row_without_key_field_rejected(self, missing):
        result = parse_placement_rows(_planogram([_row(**{missing: ""}), _row(Position="2")]))
        assert len(result.records) == 1
        assert result.rejected_rows[0]["reason"] == f"missing {missing}"

    def test_duplicate_rows_get_unique_ids(self):
        result = parse_placement_rows(_planogram([_row(), _row(), _row()]))
        ids = [r.placement_id for r in result.records]
        assert ids == ["P1|1|1|12345", "P1|1|1|12345#2", "P1|1|1|12345#3"]
        assert result.duplicate_ids == ["P1|1|1|12345", "P1|1|1|12345"]

    def test_source_row_keeps_input_order(self):
        result = parse_placement_rows(_planogram([_row(UPC="1"), _row(UPC="2")]))
        assert [r.source_row for r in result.records] == [0, 1]

    def test_optional_columns_may_be_absent(self):
        df = pd.DataFrame([{"POG": "P1", "Bay": "2", "Peg": "R1 C1", "UPC": "5"}])
        record = parse_placement_rows(df).records[0]
        assert record.description == ""
        assert record.position == 0
        assert (record.width_in, record.height_in) == (3.0, 6.0)


# ═══════════════════════════════════════════════════════════════════════════
# Delete list and store mapping
# ═══════════════════════════════════════════════════════════════════════════

class TestOtherParsers:
    def test_delete_rows(self):
        df = pd.DataFrame([
            {"POG": "P1", "UPC": "0099", "Description": "Old"},
            {"POG": "", "UPC": "1", "Description": ""},
        ])
        entries = parse_delete_rows(df)
        assert len(entries) == 1
        assert entries[0].canonical_upc == "99"
        assert entries[0].product_name == "Old"

    def test_store_rows(self):
        df = pd.DataFrame([
            {"Store": "0042", "POG": "P1"},
            {"Store": "", "POG": "P2"},
        ])
        mappings = parse_store_rows(df)
        assert [(m.store_id, m.planogram_id) for m in mappings] == [("0042", "P1")]


class TestParseInt:
    @pytest.mark.parametrize("value, expected", [
        ("12", 12), (" 3 ", 3), ("4.0", 4), ("2A", 2), ("-1", -1),
        ("", None), ("abc", None), (None, None),
    ])
    def test_values(self, value, expected):
        assert parse_int(value) == expected
