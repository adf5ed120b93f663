"""
File index lookups — product images and planogram PDFs.

The file index is a bare list of filenames (one per line in
githubfiles.csv).  Resolving and displaying the files is the renderer's job;
this module only answers "which filename belongs to this product / this
planogram".
"""

import logging

from config.board import IMAGE_EXTENSIONS, PDF_EXTENSION

logger = logging.getLogger(__name__)


def parse_file_index(text: str) -> list[str]:
    """One filename per non-blank line, whitespace stripped."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def find_product_image(
    file_index: list[str],
    upc: str,
    canonical_upc: str | None = None,
) -> str | None:
    """
    First image file whose name starts with the canonical or raw UPC.

    The canonical form is tried first; image files are usually named by the
    leading-zero-stripped code but older uploads used the raw cell value.
    """
    prefixes = [p for p in (canonical_upc, upc) if p]
    if not prefixes:
        return None

    for prefix in prefixes:
        for filename in file_index:
            if filename.startswith(prefix) and filename.lower().endswith(IMAGE_EXTENSIONS):
                return filename

    return None


def find_planogram_pdf(file_index: list[str], planogram_id: str) -> str | None:
    """First .pdf whose name contains the planogram id."""
    if not planogram_id:
        return None

    for filename in file_index:
        if planogram_id in filename and filename.lower().endswith(PDF_EXTENSION):
            return filename

    logger.info(f"No PDF found for planogram '{planogram_id}'")
    return None
