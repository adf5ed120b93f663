"""
Planogram session — the explicit context object for one user session.

Owns all per-user state: active store and planogram, the planogram index,
the bay navigator, the current match cursor, and the completion tracker.
The UI layer calls these methods and renders whatever comes back; nothing
here touches a renderer.

Store handling:
  - select_store() looks the store up through a plain callable.  An unknown
    store is an explicit failure result, not an exception.
  - Switching to a DIFFERENT store clears the completion set, also when the
    switch goes through reset_store().  Re-selecting the persisted store at
    startup (restore()) keeps it.

Scan handling:
  - Decoder callbacks are untrusted and may fire repeatedly with the same
    payload.  ScanDebouncer drops repeats inside a time window.  An
    integration layer that decodes asynchronously brackets its work with
    begin() / end(); scanner input arriving in between is dropped.  The
    matching engine itself stays pure.
  - A scan that resolves to exactly one placement marks it complete.

Public API:
    PlanogramSession(records, store_lookup, store, ...)
    ScanDebouncer(window_seconds, clock)
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from analysis.completion import CompletionTracker
from analysis.matching import find_candidates
from analysis.models import DeleteListEntry, MatchOutcome, MatchResult, PlacementRecord
from analysis.navigator import (
    BayNavigator,
    MatchCursor,
    NavigationStep,
    next_item,
    select_match,
)
from analysis.planogram_index import PlanogramIndex
from config.settings import AUTO_COMPLETE_ON_SCAN, SCAN_DEBOUNCE_SECONDS, STORE_STATE_KEY
from utils.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

class QueryStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    DELETE = "delete"
    IGNORED = "ignored"
    NO_STORE = "no_store"


@dataclass
class StoreSelection:
    ok: bool
    store_id: str
    planogram_id: str | None = None
    message: str = ""
    completion_cleared: bool = False


@dataclass
class QueryOutcome:
    """What the UI should show after a search or scan."""

    status: QueryStatus
    query: str
    match: MatchResult | None = None
    step: NavigationStep | None = None
    auto_completed: list[str] = field(default_factory=list)

    @property
    def display_text(self) -> str:
        if self.match is None:
            return self.query
        if self.status is QueryStatus.NOT_FOUND:
            return f"{self.query} → NOT FOUND"
        if self.status is QueryStatus.DELETE:
            return f"{self.query} → DELETE"
        return f"{self.query} → {self.match.normalized_query}"


# ═══════════════════════════════════════════════════════════════════════════
# Debounce
# ═══════════════════════════════════════════════════════════════════════════

class ScanDebouncer:
    """Drops repeated decoder payloads inside a time window."""

    def __init__(
        self,
        window_seconds: float = SCAN_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = window_seconds
        self._clock = clock
        self._last_payload: str | None = None
        self._last_time: float = float("-inf")
        self._busy = False

    def accept(self, payload: str) -> bool:
        """True if *payload* should be processed now."""
        if self._busy:
            return False

        now = self._clock()
        if payload == self._last_payload and now - self._last_time < self._window:
            return False

        self._last_payload = payload
        self._last_time = now
        return True

    def begin(self) -> None:
        """Mark the decoder as busy; accept() rejects everything until end()."""
        self._busy = True

    def end(self) -> None:
        self._busy = False


# ═══════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════

class PlanogramSession:
    """Single-user session over one loaded data set."""

    def __init__(
        self,
        records: Iterable[PlacementRecord],
        store_lookup: Callable[[str], str | None],
        store: KeyValueStore,
        delete_entries: Iterable[DeleteListEntry] = (),
        debouncer: ScanDebouncer | None = None,
        auto_complete_on_scan: bool = AUTO_COMPLETE_ON_SCAN,
    ) -> None:
        self._records = tuple(records)
        self._delete_entries = tuple(delete_entries)
        self._store_lookup = store_lookup
        self._kv = store
        self._debouncer = debouncer or ScanDebouncer()
        self._auto_complete_on_scan = auto_complete_on_scan

        self.tracker = CompletionTracker(store)
        self.store_id: str | None = None
        self._last_store_id: str | None = None
        self.planogram_id: str | None = None
        self.index: PlanogramIndex | None = None
        self.bays = BayNavigator(())
        self.cursor = MatchCursor()

    # ── Store selection ─────────────────────────────────────────────────

    def restore(self) -> StoreSelection | None:
        """Re-select the persisted store, keeping its completion state."""
        saved = self._kv.get(STORE_STATE_KEY)
        if not saved:
            return None
        logger.info(f"Restoring saved store '{saved}'")
        return self.select_store(saved)

    def select_store(self, store_id: str) -> StoreSelection:
        """
        Activate *store_id*: build its index and reset navigation.

        Completion is cleared only when the store differs from the last one
        persisted.  An unknown store leaves the session unchanged.
        """
        store_id = (store_id or "").strip()
        if not store_id:
            return StoreSelection(ok=False, store_id="", message="Enter a store number")

        planogram_id = self._store_lookup(store_id)
        if planogram_id is None:
            logger.info(f"Store '{store_id}' not found in mapping")
            return StoreSelection(ok=False, store_id=store_id,
                                  message=f"Store {store_id} not found")

        previous_store = self._last_store_id or self._kv.get(STORE_STATE_KEY)
        cleared = previous_store is not None and previous_store != store_id
        if cleared:
            self.tracker.reset()

        self._last_store_id = store_id
        self.store_id = store_id
        self.planogram_id = planogram_id
        self._kv.set(STORE_STATE_KEY, store_id)

        self.index = PlanogramIndex.build(self._records, planogram_id, self._delete_entries)
        self.tracker.bind(self.index)
        self.bays = BayNavigator(self.index.all_bays())
        self.cursor = MatchCursor()

        logger.info(
            f"Selected store '{store_id}' → planogram '{planogram_id}' "
            f"({len(self.bays.bays)} bays, completion cleared={cleared})"
        )
        message = "" if self.bays.bays else "No items found for this Planogram."
        return StoreSelection(ok=True, store_id=store_id, planogram_id=planogram_id,
                              message=message, completion_cleared=cleared)

    def reset_store(self) -> None:
        """
        Forget the saved store; the session goes back to "no store".

        Completion is kept until a different store is selected.
        """
        self._kv.delete(STORE_STATE_KEY)
        self.store_id = None
        self.planogram_id = None
        self.index = None
        self.tracker.bind(None)
        self.bays = BayNavigator(())
        self.cursor = MatchCursor()

    # ── Bays ────────────────────────────────────────────────────────────

    @property
    def current_bay(self) -> int | None:
        return self.bays.current_bay

    def change_bay(self, direction: int) -> bool:
        return self.bays.change_bay(direction)

    def current_bay_items(self) -> tuple[PlacementRecord, ...]:
        if self.index is None or self.current_bay is None:
            return ()
        return self.index.items_in_bay(self.current_bay)

    # ── Queries ─────────────────────────────────────────────────────────

    def handle_query(self, raw: str, from_scanner: bool = False) -> QueryOutcome:
        """
        Resolve a search-box entry or decoded barcode.

        Blank input and debounced scanner repeats come back as IGNORED.
        A new query always replaces the previous match cursor.
        """
        query = (raw or "").strip()
        if not query:
            return QueryOutcome(status=QueryStatus.IGNORED, query=query)

        if from_scanner and not self._debouncer.accept(query):
            logger.debug(f"Debounced scan '{query}'")
            return QueryOutcome(status=QueryStatus.IGNORED, query=query)

        if self.index is None:
            return QueryOutcome(status=QueryStatus.NO_STORE, query=query)

        return self._resolve(query, from_scanner)

    def advance_match(self, step: int) -> NavigationStep | None:
        """Move through the current matches (wraps) and show the new one."""
        if self.cursor.current is None:
            return None
        self.cursor.advance(step)
        return select_match(self.cursor, self.bays)

    # ── Completion ──────────────────────────────────────────────────────

    def toggle_complete(self, placement_id: str) -> bool:
        return self.tracker.toggle(placement_id)

    def complete_and_advance(self, placement_id: str) -> PlacementRecord | None:
        """Mark a placement done and return the next one in its bay, if any."""
        self.tracker.set_complete(placement_id, True)
        if self.index is None:
            return None
        record = self.index.find_by_placement_id(placement_id)
        if record is None:
            return None
        return next_item(self.index, record)

    def clear_progress(self) -> None:
        self.tracker.reset()

    def progress(self, bay: int | None = None) -> tuple[int, int]:
        return self.tracker.progress(bay)

    # ── Internal ────────────────────────────────────────────────────────

    def _resolve(self, query: str, from_scanner: bool) -> QueryOutcome:
        match = find_candidates(query, self.index, from_scanner)

        if match.outcome is MatchOutcome.DELETE:
            self.cursor = MatchCursor()
            return QueryOutcome(status=QueryStatus.DELETE, query=query, match=match)

        if match.outcome is MatchOutcome.NOT_FOUND:
            self.cursor = MatchCursor()
            return QueryOutcome(status=QueryStatus.NOT_FOUND, query=query, match=match)

        self.cursor = MatchCursor(match.records)
        step = select_match(self.cursor, self.bays)

        auto_completed: list[str] = []
        if from_scanner and self._auto_complete_on_scan and len(match.records) == 1:
            placement_id = match.records[0].placement_id
            if not self.tracker.is_complete(placement_id):
                self.tracker.set_complete(placement_id, True)
                auto_completed.append(placement_id)

        return QueryOutcome(status=QueryStatus.FOUND, query=query, match=match,
                            step=step, auto_completed=auto_completed)
