"""
UPC normalization and matching configuration.

Source of truth for the OCR look-alike table applied by
processing/upc_normalizer.py and the manual-search limits used by
analysis/matching.py.
"""

# ---------------------------------------------------------------------------
# OCR confusion table: look-alike character (uppercase) → digit.
# Applied case-insensitively BEFORE non-digit stripping.
# ---------------------------------------------------------------------------
OCR_SUBSTITUTIONS: dict[str, str] = {
    "O": "0",
    "Q": "0",
    "I": "1",
    "L": "1",
    "|": "1",
    "S": "5",
    "$": "5",
    "B": "8",
    "Z": "2",
    "G": "6",
    "T": "7",
}

# ---------------------------------------------------------------------------
# Manual keyboard queries with at most this many digits are treated as a
# "last digits" search (suffix match).  Scanner input never is.
# ---------------------------------------------------------------------------
FUZZY_QUERY_MAX_DIGITS: int = 4

# Canonical value returned when nothing digit-like survives normalization.
EMPTY_CANONICAL_UPC: str = "0"
