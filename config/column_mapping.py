"""
Column name mapping configuration.

Maps raw CSV header names (planogram data, store mapping, delete list) to the
canonical column names the record parser understands.  Header spellings vary
between planogram exports, legacy description columns in particular.
"""

# ---------------------------------------------------------------------------
# Canonical column names
# ---------------------------------------------------------------------------
PLANOGRAM_COLUMNS: list[str] = [
    "POG",
    "Bay",
    "Peg",
    "Position",
    "UPC",
    "Width",
    "Height",
    "Description",
]

# Rows cannot produce a PlacementRecord without these.
REQUIRED_PLANOGRAM_COLUMNS: list[str] = ["POG", "Bay", "Peg", "UPC"]

STORE_MAPPING_COLUMNS: list[str] = ["Store", "POG"]

DELETE_LIST_COLUMNS: list[str] = ["POG", "UPC", "Description"]
REQUIRED_DELETE_LIST_COLUMNS: list[str] = ["POG", "UPC"]

# ---------------------------------------------------------------------------
# Exact matches: raw name (lowercase) → canonical column name
# ---------------------------------------------------------------------------
EXACT_MATCHES: dict[str, str] = {
    "pog": "POG",
    "bay": "Bay",
    "peg": "Peg",
    "position": "Position",
    "upc": "UPC",
    "width": "Width",
    "height": "Height",
    "description": "Description",
    "store": "Store",
}

# ---------------------------------------------------------------------------
# Known renames: raw name (lowercase) → canonical column name
# Legacy exports and the delete list use different terms for the same field.
# ---------------------------------------------------------------------------
KNOWN_RENAMES: dict[str, str] = {
    "planogram": "POG",
    "planogram id": "POG",
    "pog id": "POG",
    "bay number": "Bay",
    "bay #": "Bay",
    "peg hole": "Peg",
    "peg location": "Peg",
    "pos": "Position",
    "position number": "Position",
    "upc code": "UPC",
    "barcode": "UPC",
    "width (in)": "Width",
    "height (in)": "Height",
    "productdescription": "Description",
    "product description": "Description",
    "item description": "Description",
    "productname": "Description",
    "product name": "Description",
    "store number": "Store",
    "store #": "Store",
    "store id": "Store",
}
