"""
Core data types shared by the layout, matching, and tracking modules.

All record types are frozen: they are built once at load time by
processing/record_parser.py and replaced wholesale when the store changes.
"""

from dataclasses import dataclass, field
from enum import Enum


# ═══════════════════════════════════════════════════════════════════════════
# Planogram data
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PegAddress:
    """A peg hole on the board, 1-based.  Identifies the frog's left leg."""

    row: int
    col: int


@dataclass(frozen=True)
class PlacementRecord:
    """One product placement (facing) on the planogram."""

    planogram_id: str
    bay: str
    """Bay cell as it appears in the data file."""

    bay_number: int | None
    """Parsed bay; None when the cell is not an integer."""

    peg: PegAddress
    peg_raw: str
    position: int
    """Ordinal within the bay; 0 when the cell is blank or unparseable."""

    upc: str
    canonical_upc: str
    width_in: float
    height_in: float
    description: str = ""
    source_row: int = 0
    placement_id: str = ""

    @property
    def has_valid_bay(self) -> bool:
        return self.bay_number is not None


@dataclass(frozen=True)
class DeleteListEntry:
    """A UPC that must NOT be placed on the given planogram."""

    planogram_id: str
    upc: str
    canonical_upc: str
    product_name: str = ""


@dataclass(frozen=True)
class StoreMapping:
    store_id: str
    planogram_id: str


# ═══════════════════════════════════════════════════════════════════════════
# Geometry
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PegPlacement:
    """
    Pixel geometry for one product hung from a frog.

    hole_x / hole_y is the centre of the left-leg hole (the red frog dot);
    left / top / width / height is the product box.
    """

    hole_x: float
    hole_y: float
    frog_center_x: float
    left: float
    top: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


# ═══════════════════════════════════════════════════════════════════════════
# Matching
# ═══════════════════════════════════════════════════════════════════════════

class MatchOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    DELETE = "delete"


class MatchStrategy(str, Enum):
    EXACT = "exact"
    NO_CHECK_DIGIT = "no_check_digit"
    """Query carries a check digit the data lacks."""

    DATA_CHECK_DIGIT = "data_check_digit"
    """Data carries a check digit the query lacks."""

    FUZZY_SUFFIX = "fuzzy_suffix"


@dataclass
class MatchResult:
    """Outcome of one query against the planogram index."""

    query: str
    normalized_query: str
    outcome: MatchOutcome = MatchOutcome.NOT_FOUND
    strategy: MatchStrategy | None = None
    records: list[PlacementRecord] = field(default_factory=list)
    delete_entries: list[DeleteListEntry] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.outcome is MatchOutcome.FOUND

    @property
    def is_delete(self) -> bool:
        return self.outcome is MatchOutcome.DELETE
