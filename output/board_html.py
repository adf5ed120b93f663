"""
Board HTML renderer — turns laid-out placements into an HTML snippet.

Consumes plain data only (PlacedProduct geometry, completion flags, the
file index) and returns markup for st.markdown(unsafe_allow_html=True).  No
layout math happens here; every coordinate comes from analysis/peg_layout.py.

Public API:
    render_board(placed, ppi, completed_ids, ...) → str
"""

import html
import logging
from typing import Callable

from analysis.peg_layout import PlacedProduct, board_size_px
from processing.file_index import find_product_image

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════════════════════════════════════

_BOARD_STYLE = (
    "position:relative; margin:0 auto; background-color:#f4f1ea; "
    "background-image:radial-gradient(#333 15%, transparent 16%); "
    "background-size:{ppi:.2f}px {ppi:.2f}px; "
    "width:{width:.2f}px; height:{height:.2f}px;"
)
_BOX_STYLE = (
    "position:absolute; left:{left:.2f}px; top:{top:.2f}px; "
    "width:{width:.2f}px; height:{height:.2f}px; box-sizing:border-box; "
    "border:1px solid {border}; background:{fill}; overflow:hidden; "
    "display:flex; align-items:center; justify-content:center;"
)
_DOT_STYLE = (
    "position:absolute; left:{x:.2f}px; top:{y:.2f}px; width:6px; height:6px; "
    "margin:-3px 0 0 -3px; border-radius:50%; background:#d32f2f; z-index:2;"
)

_FILL_OPEN = "rgba(255,255,255,0.9)"
_FILL_DONE = "rgba(76,175,80,0.55)"
_BORDER_OPEN = "#555"
_BORDER_HIGHLIGHT = "#ff9800"


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def render_board(
    placed: list[PlacedProduct],
    ppi: float,
    completed_ids: frozenset[str] | set[str],
    file_index: list[str] | None = None,
    highlight_id: str | None = None,
    image_url: Callable[[str], str] | None = None,
) -> str:
    """
    Render one bay as an absolutely-positioned HTML board.

    Args:
        placed: Output of peg_layout.layout_bay().
        ppi: Pixels per inch used for the layout.
        completed_ids: Placement ids to draw as done.
        file_index: Filenames searched for product images.
        highlight_id: Placement to outline (current match).
        image_url: Maps a filename to a URL; images are skipped without it.

    Returns:
        HTML string.
    """
    width, height = board_size_px(ppi)
    parts = [f'<div class="pog-board" style="{_BOARD_STYLE.format(ppi=ppi, width=width, height=height)}">']

    for item in placed:
        parts.append(_render_dot(item))
        parts.append(_render_box(
            item,
            done=item.record.placement_id in completed_ids,
            highlighted=item.record.placement_id == highlight_id,
            image=_image_for(item, file_index, image_url),
        ))

    parts.append("</div>")
    logger.debug(f"Rendered board with {len(placed)} products")
    return "".join(parts)


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _render_dot(item: PlacedProduct) -> str:
    geometry = item.geometry
    return f'<div class="frog-dot" style="{_DOT_STYLE.format(x=geometry.hole_x, y=geometry.hole_y)}"></div>'


def _render_box(item: PlacedProduct, done: bool, highlighted: bool, image: str | None) -> str:
    geometry = item.geometry
    record = item.record

    style = _BOX_STYLE.format(
        left=geometry.left,
        top=geometry.top,
        width=geometry.width,
        height=geometry.height,
        border=_BORDER_HIGHLIGHT if highlighted else _BORDER_OPEN,
        fill=_FILL_DONE if done else _FILL_OPEN,
    )
    if highlighted:
        style += " border-width:3px; z-index:3;"

    classes = ["product-box"]
    if done:
        classes.append("completed")
    if highlighted:
        classes.append("highlight")

    upc = html.escape(record.upc)
    if image:
        content = (
            f'<img src="{html.escape(image, quote=True)}" alt="{upc}" '
            f'style="max-width:100%; max-height:100%;">'
        )
    else:
        content = f'<span style="font-size:8px; text-align:center; padding:2px;">{upc}</span>'

    return (
        f'<div class="{" ".join(classes)}" '
        f'data-placement="{html.escape(record.placement_id, quote=True)}" '
        f'title="{html.escape(record.description, quote=True)}" '
        f'style="{style}">{content}</div>'
    )


def _image_for(
    item: PlacedProduct,
    file_index: list[str] | None,
    image_url: Callable[[str], str] | None,
) -> str | None:
    if not file_index or image_url is None:
        return None
    filename = find_product_image(file_index, item.record.upc, item.record.canonical_upc)
    if filename is None:
        return None
    return image_url(filename)
