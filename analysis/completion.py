"""
Completion tracker — which placements are done, and progress per bay.

Completion is keyed by placement_id (one per PlacementRecord), never by bare
UPC, so marking one facing of a product done leaves its sibling facings
untouched.

The completed set is persisted through a key/value store as a JSON list of
placement ids.  Loading is lenient: an absent key, malformed JSON, or a
non-list value all load as an empty set.  Every mutation writes back a valid
JSON list.

The tracker never mutates PlacementRecord data.  Progress is a pure fold over
the bound PlanogramIndex.

Public API:
    CompletionTracker(store, key)
      .bind(index)                    → attach the active planogram
      .toggle(placement_id)           → bool (new state)
      .set_complete(placement_id, d)  → bool (new state)
      .is_complete(placement_id)      → bool
      .progress(bay=None)             → (done, total)
      .progress_percent(bay=None)     → int
      .reset()                        → clear everything
"""

import json
import logging

from analysis.planogram_index import PlanogramIndex
from config.settings import COMPLETION_STATE_KEY
from utils.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class CompletionTracker:
    """Per-placement completion set with write-through persistence."""

    def __init__(self, store: KeyValueStore, key: str = COMPLETION_STATE_KEY) -> None:
        self._store = store
        self._key = key
        self._completed: set[str] = _load_completed(store.get(key))
        self._index: PlanogramIndex | None = None

        logger.info(f"Loaded {len(self._completed)} completed placements from '{key}'")

    # ── Binding ─────────────────────────────────────────────────────────

    def bind(self, index: PlanogramIndex | None) -> None:
        """Attach the index progress is computed over.  Does not clear state."""
        self._index = index

    # ── Mutations ───────────────────────────────────────────────────────

    def toggle(self, placement_id: str) -> bool:
        """Flip one placement's state, persist, and return the new state."""
        if placement_id in self._completed:
            self._completed.discard(placement_id)
            new_state = False
        else:
            self._completed.add(placement_id)
            new_state = True

        self._save()
        logger.debug(f"Toggled '{placement_id}' → {'done' if new_state else 'open'}")
        return new_state

    def set_complete(self, placement_id: str, done: bool = True) -> bool:
        """Idempotent setter.  Persists only when the state actually changes."""
        if (placement_id in self._completed) != done:
            return self.toggle(placement_id)
        return done

    def reset(self) -> None:
        """Clear the whole completion set (store switch or "clear all")."""
        cleared = len(self._completed)
        self._completed.clear()
        self._save()
        logger.info(f"Cleared {cleared} completed placements")

    # ── Queries ─────────────────────────────────────────────────────────

    def is_complete(self, placement_id: str) -> bool:
        return placement_id in self._completed

    @property
    def completed_ids(self) -> frozenset[str]:
        return frozenset(self._completed)

    def progress(self, bay: int | None = None) -> tuple[int, int]:
        """
        (done, total) for one bay, or the whole planogram when *bay* is None.

        The whole-planogram total includes records with an unparseable bay.
        Returns (0, 0) when no index is bound.
        """
        if self._index is None:
            return 0, 0

        records = self._index.records if bay is None else self._index.items_in_bay(bay)
        done = sum(1 for record in records if record.placement_id in self._completed)
        return done, len(records)

    def progress_percent(self, bay: int | None = None) -> int:
        done, total = self.progress(bay)
        if total == 0:
            return 0
        return round(done / total * 100)

    # ── Persistence ─────────────────────────────────────────────────────

    def _save(self) -> None:
        self._store.set(self._key, json.dumps(sorted(self._completed)))


def _load_completed(raw: str | None) -> set[str]:
    """Parse the persisted JSON list; anything unexpected loads as empty."""
    if not raw:
        return set()

    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        logger.warning("Completion state is not valid JSON — starting empty")
        return set()

    if not isinstance(parsed, list):
        logger.warning("Completion state is not a list — starting empty")
        return set()

    return {item for item in parsed if isinstance(item, str)}
