"""
Bay and match navigation.

Two independent pieces of session-owned state:

  - BayNavigator: which bay is on screen.  change_bay() CLAMPS at the first
    and last bay (no wraparound) and is a no-op at an edge.
  - MatchCursor: position within the matches of one query.  advance() WRAPS
    modulo the match count.  A new search simply replaces the cursor.

select_match() ties them together: if the selected match lives in another
bay the bay switches first (the renderer must redraw), then the placement is
highlighted.

next_item() gives the "next" placement after one is marked complete:
position + 1 in the same bay, or None at the end of the bay.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from analysis.models import PlacementRecord
from analysis.planogram_index import PlanogramIndex

logger = logging.getLogger(__name__)


class CursorState(str, Enum):
    NO_MATCH = "no_match"
    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True)
class NavigationStep:
    """What the renderer has to do after a match is selected."""

    bay: int | None
    bay_changed: bool
    highlight_placement_id: str | None


# ═══════════════════════════════════════════════════════════════════════════
# Bay navigation
# ═══════════════════════════════════════════════════════════════════════════

class BayNavigator:
    def __init__(self, bays: tuple[int, ...] | list[int]) -> None:
        self._bays = tuple(bays)
        self._position = 0

    @property
    def bays(self) -> tuple[int, ...]:
        return self._bays

    @property
    def current_bay(self) -> int | None:
        if not self._bays:
            return None
        return self._bays[self._position]

    @property
    def bay_position(self) -> int:
        """0-based index of the current bay."""
        return self._position

    def change_bay(self, direction: int) -> bool:
        """
        Move by *direction* bays, clamped to the first/last bay.

        Returns True if the current bay changed.
        """
        if not self._bays:
            return False

        target = max(0, min(self._position + direction, len(self._bays) - 1))
        if target == self._position:
            return False

        self._position = target
        logger.debug(f"Changed to bay {self.current_bay} ({self.bay_label()})")
        return True

    def go_to_bay(self, bay: int) -> bool:
        """Jump to *bay*.  Returns True if the current bay changed."""
        if bay not in self._bays:
            logger.debug(f"Bay {bay} is not part of this planogram")
            return False

        target = self._bays.index(bay)
        if target == self._position:
            return False

        self._position = target
        return True

    def bay_label(self) -> str:
        if not self._bays:
            return "No bays"
        return f"Bay {self._position + 1} of {len(self._bays)}"


# ═══════════════════════════════════════════════════════════════════════════
# Match cursor
# ═══════════════════════════════════════════════════════════════════════════

class MatchCursor:
    def __init__(self, records: list[PlacementRecord] | None = None) -> None:
        self._records = tuple(records or ())
        self._index = 0

    @property
    def records(self) -> tuple[PlacementRecord, ...]:
        return self._records

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._records)

    @property
    def state(self) -> CursorState:
        if not self._records:
            return CursorState.NO_MATCH
        if len(self._records) == 1:
            return CursorState.SINGLE
        return CursorState.MULTI

    @property
    def current(self) -> PlacementRecord | None:
        if not self._records:
            return None
        return self._records[self._index]

    def advance(self, step: int) -> PlacementRecord | None:
        """Move the cursor by *step*, wrapping around.  No-op without matches."""
        if not self._records:
            return None
        self._index = (self._index + step) % len(self._records)
        return self._records[self._index]

    def jump_to(self, position: int) -> PlacementRecord | None:
        """Move the cursor to *position*, wrapped into range."""
        if not self._records:
            return None
        self._index = position % len(self._records)
        return self._records[self._index]

    def label(self) -> str:
        if not self._records:
            return ""
        return f"Match {self._index + 1} of {len(self._records)}"


# ═══════════════════════════════════════════════════════════════════════════
# Selection & sequencing
# ═══════════════════════════════════════════════════════════════════════════

def select_match(cursor: MatchCursor, bays: BayNavigator) -> NavigationStep:
    """
    Show the cursor's current match: switch bay first if needed, then
    request a highlight of that placement.
    """
    record = cursor.current
    if record is None:
        return NavigationStep(bay=bays.current_bay, bay_changed=False,
                              highlight_placement_id=None)

    bay_changed = False
    if record.bay_number is not None and record.bay_number != bays.current_bay:
        bay_changed = bays.go_to_bay(record.bay_number)

    return NavigationStep(
        bay=bays.current_bay,
        bay_changed=bay_changed,
        highlight_placement_id=record.placement_id,
    )


def next_item(index: PlanogramIndex, record: PlacementRecord) -> PlacementRecord | None:
    """The placement at position + 1 in the same bay, or None (no wraparound)."""
    if record.bay_number is None:
        return None
    return index.find_position(record.bay_number, record.position + 1)
