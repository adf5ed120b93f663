"""
Peg coordinate transform — converts a peg address and product size into
pixel geometry on the rendered board.

Frog logic:
  - The peg hole (row, col) is the LEFT leg of a two-pronged bracket ("frog")
    spanning holes col and col+1.
  - Hole centre:   hole_x = (col - 1) * ppi + ppi / 2
                   hole_y = (row - 1) * ppi + ppi / 2
  - Frog centre:   frog_center_x = hole_x + ppi / 2
  - Product box is centred horizontally on the frog and hangs DOWN starting
    half an inch below the hole row.

Pixels-per-inch is fitted by the caller from the viewport with
fit_pixels_per_inch() and must be recomputed whenever the viewport changes.

Parsing is lenient: unparseable pegs land at (1, 1)
and unparseable dimensions fall back to 3 x 6 inches.  Nothing here raises
on malformed planogram data.

Public API:
    parse_peg(token) → PegAddress
    parse_dimension(value, default) → float
    place(peg, width_in, height_in, ppi) → PegPlacement
    fit_pixels_per_inch(available_width, available_height, ...) → float
    board_size_px(ppi) → (width_px, height_px)
    layout_bay(index, bay, ppi) → list[PlacedProduct]
"""

import logging
import math
import re
from dataclasses import dataclass

from analysis.models import PegAddress, PegPlacement, PlacementRecord
from analysis.planogram_index import PlanogramIndex
from config.board import (
    BOARD_HEIGHT_INCHES,
    BOARD_WIDTH_INCHES,
    DEFAULT_PEG_COL,
    DEFAULT_PEG_ROW,
    DIMENSION_UNIT_TOKENS,
    FROG_OFFSET_INCHES,
    HANG_OFFSET_INCHES,
)

logger = logging.getLogger(__name__)

# "R02 C03", "r2c3", "R 2 C 3"
_PEG_PATTERN = re.compile(r"R\s*(\d+)\s*C\s*(\d+)", re.IGNORECASE)

# Longest tokens first so "inches" is stripped before "in".
_UNIT_SUFFIX_PATTERN = re.compile(
    r"\s*(?:"
    + "|".join(re.escape(t) for t in sorted(DIMENSION_UNIT_TOKENS, key=len, reverse=True))
    + r")\.?\s*$",
    re.IGNORECASE,
)


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PlacedProduct:
    """A record together with its on-screen geometry."""

    record: PlacementRecord
    geometry: PegPlacement


# ═══════════════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════════════

def parse_peg(token: object) -> PegAddress:
    """
    Parse a peg token of the form "R<row> C<col>".

    Case-insensitive and whitespace-tolerant.  Blank, malformed, or zero
    coordinates fall back to row 1, col 1.
    """
    peg = try_parse_peg(token)
    if peg is None:
        return PegAddress(row=DEFAULT_PEG_ROW, col=DEFAULT_PEG_COL)
    return peg


def try_parse_peg(token: object) -> PegAddress | None:
    """Like parse_peg() but returns None instead of the fallback."""
    if token is None:
        return None

    match = _PEG_PATTERN.search(str(token))
    if not match:
        return None

    row, col = int(match.group(1)), int(match.group(2))
    if row < 1 or col < 1:
        return None

    return PegAddress(row=row, col=col)


def parse_dimension(value: object, default: float) -> float:
    """
    Parse a dimension cell in inches, e.g. "6", "6 in", "2.5 inches", '4"'.

    Returns *default* for blank, non-numeric, non-finite, or non-positive
    values.
    """
    number = try_parse_dimension(value)
    if number is None:
        return default
    return number


def try_parse_dimension(value: object) -> float | None:
    """Like parse_dimension() but returns None instead of a default."""
    if value is None:
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        text = _UNIT_SUFFIX_PATTERN.sub("", str(value).strip())
        try:
            number = float(text)
        except ValueError:
            return None

    if not math.isfinite(number) or number <= 0:
        return None
    return number


# ═══════════════════════════════════════════════════════════════════════════
# Geometry
# ═══════════════════════════════════════════════════════════════════════════

def place(
    peg: PegAddress,
    width_in: float,
    height_in: float,
    ppi: float,
) -> PegPlacement:
    """
    Compute the frog dot and product box for one placement.

    Args:
        peg: Left-leg hole of the frog.
        width_in: Product width in inches.
        height_in: Product height in inches.
        ppi: Pixels per inch (one hole pitch in pixels).

    Returns:
        PegPlacement in pixel space, origin at the board's top-left corner.
    """
    hole_x = (peg.col - 1) * ppi + ppi / 2
    hole_y = (peg.row - 1) * ppi + ppi / 2

    frog_center_x = hole_x + ppi * FROG_OFFSET_INCHES

    width_px = width_in * ppi
    height_px = height_in * ppi

    return PegPlacement(
        hole_x=hole_x,
        hole_y=hole_y,
        frog_center_x=frog_center_x,
        left=frog_center_x - width_px / 2,
        top=hole_y + ppi * HANG_OFFSET_INCHES,
        width=width_px,
        height=height_px,
    )


def fit_pixels_per_inch(
    available_width: float,
    available_height: float,
    board_width_in: float = BOARD_WIDTH_INCHES,
    board_height_in: float = BOARD_HEIGHT_INCHES,
    margin_px: float = 0,
) -> float:
    """
    Largest scale at which the whole board fits the viewport undistorted.

    Takes the minimum of the width-constrained and height-constrained scale
    factors.  Returns 0.0 when there is no usable space.
    """
    usable_width = available_width - margin_px
    usable_height = available_height - margin_px

    if usable_width <= 0 or usable_height <= 0:
        return 0.0
    if board_width_in <= 0 or board_height_in <= 0:
        return 0.0

    return min(usable_width / board_width_in, usable_height / board_height_in)


def board_size_px(
    ppi: float,
    board_width_in: float = BOARD_WIDTH_INCHES,
    board_height_in: float = BOARD_HEIGHT_INCHES,
) -> tuple[float, float]:
    return board_width_in * ppi, board_height_in * ppi


def layout_bay(index: PlanogramIndex, bay: int, ppi: float) -> list[PlacedProduct]:
    """
    Geometry for every record in *bay*, in navigation order.

    Plain data for the renderer; completion flags and images are the
    renderer's concern.
    """
    placed = [
        PlacedProduct(
            record=record,
            geometry=place(record.peg, record.width_in, record.height_in, ppi),
        )
        for record in index.items_in_bay(bay)
    ]
    logger.debug(f"Laid out {len(placed)} products for bay {bay} at ppi={ppi:.2f}")
    return placed
