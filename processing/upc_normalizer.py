"""
UPC normalizer — turns raw scanned or typed text into a canonical digit string.

Steps, each feeding the next:
  1. Trim whitespace and strip control characters (carriage returns etc.)
  2. Replace OCR look-alike characters with digits (O→0, I→1, S→5, ...)
  3. Strip every remaining non-digit character
  4. Strip leading zeros
  5. Empty result → "0"

normalize_upc() is pure, total (never raises), and idempotent.  The canonical
form is what every matching comparison in analysis/matching.py uses.

Public API:
    normalize_upc(raw) → str
    strip_check_digit(canonical) → str
"""

import logging
import math
import re

from config.upc_rules import EMPTY_CANONICAL_UPC, OCR_SUBSTITUTIONS

logger = logging.getLogger(__name__)

_CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
# ASCII digits only; fullwidth and other Unicode digits are dropped.
_NON_DIGIT_PATTERN = re.compile(r"[^0-9]")

# str.translate table covering both cases of every look-alike letter.
_OCR_TRANSLATION: dict[int, str] = {}
for _char, _digit in OCR_SUBSTITUTIONS.items():
    _OCR_TRANSLATION[ord(_char.upper())] = _digit
    _OCR_TRANSLATION[ord(_char.lower())] = _digit


def normalize_upc(raw: object) -> str:
    """
    Normalize a raw UPC value to its canonical digit string.

    Accepts anything a CSV cell or decoder callback can produce: str, int,
    None, or NaN.  Missing values normalize to "0", the same as text with no
    digits in it.

    Args:
        raw: Raw UPC text as scanned, typed, or read from the data file.

    Returns:
        Canonical UPC: digits only, no leading zeros, never empty.
    """
    if raw is None:
        return EMPTY_CANONICAL_UPC
    if isinstance(raw, float):
        if math.isnan(raw):
            return EMPTY_CANONICAL_UPC
        # Spreadsheet exports sometimes hand UPCs over as 12345.0
        if raw.is_integer():
            raw = int(raw)

    text = _CONTROL_CHARS_PATTERN.sub("", str(raw).strip())
    text = text.translate(_OCR_TRANSLATION)
    digits = _NON_DIGIT_PATTERN.sub("", text).lstrip("0")

    if not digits:
        return EMPTY_CANONICAL_UPC
    return digits


def strip_check_digit(canonical: str) -> str:
    """Drop the trailing (check) digit; returns "" for single-digit input."""
    return canonical[:-1]
