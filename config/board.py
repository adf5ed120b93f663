"""
Pegboard geometry configuration.

Physical board size, product size defaults, and renderer constants used by
analysis/peg_layout.py and output/board_html.py.

1 board unit = 1 inch = 1 peg-hole pitch.
"""

# ---------------------------------------------------------------------------
# Board physics: holes run from column 1 to 46 and row 1 to 64.
# ---------------------------------------------------------------------------
BOARD_WIDTH_INCHES: int = 46
BOARD_HEIGHT_INCHES: int = 64

# ---------------------------------------------------------------------------
# Product size used when the Width / Height cell is blank or unparseable.
# ---------------------------------------------------------------------------
DEFAULT_WIDTH_INCHES: float = 3.0
DEFAULT_HEIGHT_INCHES: float = 6.0

# Peg used when the Peg cell cannot be parsed.  Renders visibly wrong
# (top-left corner) instead of raising.
DEFAULT_PEG_ROW: int = 1
DEFAULT_PEG_COL: int = 1

# The frog spans two holes; its centre sits half a hole right of the left leg.
FROG_OFFSET_INCHES: float = 0.5

# Products hang down starting half an inch below the hole row.
HANG_OFFSET_INCHES: float = 0.5

# Horizontal padding (px) the renderer keeps free around the board.
CANVAS_MARGIN_PX: int = 20

# Unit tokens accepted after a dimension value, e.g. "6 in" or '6"'.
DIMENSION_UNIT_TOKENS: tuple[str, ...] = ("inches", "inch", "in", '"')

# ---------------------------------------------------------------------------
# File index: extensions treated as product images.
# ---------------------------------------------------------------------------
IMAGE_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".gif", ".webp")
PDF_EXTENSION: str = ".pdf"
