"""
Streamlit entry point — Pegboard Planogram Guide UI.

User flow:
  1. Load planogram data (local data directory or remote base URL)
  2. Select a store (the last store is restored automatically)
  3. Browse bays, see where every product hangs on the pegboard
  4. Search or scan a UPC → jump to its bay and highlight it
  5. Mark placements complete, track progress, export progress to Excel

Contains NO business logic — only calls analysis/processing modules and
displays results.

Configuration (.streamlit/secrets.toml):
  DATA_DIR       local directory holding the CSV files (default: ./data)
  DATA_BASE_URL  base URL to fetch the CSV files from (overrides DATA_DIR)
  STATE_DIR      where completion state is persisted (default: DATA_DIR)
"""

import logging
import tempfile
from pathlib import Path

import streamlit as st

from analysis.navigator import CursorState
from analysis.peg_layout import fit_pixels_per_inch, layout_bay
from analysis.progress_report import bay_summary, placements_table
from analysis.session import PlanogramSession, QueryStatus
from config.board import BOARD_WIDTH_INCHES, BOARD_HEIGHT_INCHES, CANVAS_MARGIN_PX
from config.settings import STATE_FILENAME
from output.board_html import render_board
from processing.csv_loader import DataLoadError, PlanogramData, load_planogram_data
from processing.file_index import find_planogram_pdf
from processing.quality_checker import QualityReport, check_quality
from utils.excel_formatter import export_progress
from utils.kv_store import JsonFileStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Page configuration
# ═══════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title="Planogram Guide",
    page_icon="🧩",
    layout="wide",
    initial_sidebar_state="expanded",
)

data_dir = Path(st.secrets.get("DATA_DIR", "data"))
base_url = st.secrets.get("DATA_BASE_URL", None) or None
state_dir = Path(st.secrets.get("STATE_DIR", str(data_dir)))


# ═══════════════════════════════════════════════════════════════════════════
# Data loading
# ═══════════════════════════════════════════════════════════════════════════

@st.cache_resource(show_spinner="Loading planogram data...")
def _load_data(data_dir_str: str, url: str | None) -> tuple[PlanogramData, QualityReport]:
    data = load_planogram_data(data_dir=Path(data_dir_str), base_url=url)
    return data, check_quality(data)


def _file_url(filename: str) -> str:
    if base_url:
        return f"{base_url.rstrip('/')}/{filename}"
    return str(data_dir / filename)


try:
    planogram_data, quality_report = _load_data(str(data_dir), base_url)
except DataLoadError as exc:
    logger.error(f"Data load error: {exc}")
    st.error(f"⚠️ Data Load Error: {exc}")
    st.caption("Check that the CSV files exist in the configured data location.")
    st.stop()


# ═══════════════════════════════════════════════════════════════════════════
# Session state initialisation
# ═══════════════════════════════════════════════════════════════════════════

def _init_session_state() -> None:
    """Create the planogram session once per browser session."""
    if "session" in st.session_state:
        return

    session = PlanogramSession(
        records=planogram_data.records,
        store_lookup=planogram_data.lookup_store,
        store=JsonFileStore(state_dir / STATE_FILENAME),
        delete_entries=planogram_data.delete_entries,
    )
    session.restore()
    st.session_state["session"] = session
    st.session_state["highlight_id"] = None
    st.session_state["scan_message"] = ""


_init_session_state()
session: PlanogramSession = st.session_state["session"]


def _done_key(placement_id: str) -> str:
    return f"done_{placement_id}"


def _on_done_toggled(placement_id: str) -> None:
    """Checkbox callback; the tracker is the source of truth for completion."""
    session.tracker.set_complete(placement_id, st.session_state[_done_key(placement_id)])


# ═══════════════════════════════════════════════════════════════════════════
# Sidebar — Store & settings
# ═══════════════════════════════════════════════════════════════════════════

st.sidebar.title("🏬 Store")

if session.store_id:
    st.sidebar.markdown(f"**Store:** {session.store_id}  \n**POG:** {session.planogram_id}")
    if st.sidebar.button("Change store"):
        session.reset_store()
        st.session_state["highlight_id"] = None
        st.rerun()
else:
    with st.sidebar.form("store_form"):
        store_input = st.text_input("Store number", key="store_input")
        if st.form_submit_button("Load store", type="primary", key="load_store"):
            selection = session.select_store(store_input)
            if selection.ok:
                st.rerun()
            st.error(selection.message)

st.sidebar.divider()
available_width = st.sidebar.slider(
    "Board width (px)", min_value=300, max_value=1600, value=700, step=50,
    help="Viewport width the board is fitted into.",
)
available_height = st.sidebar.slider(
    "Board height (px)", min_value=400, max_value=2400, value=1000, step=50,
)

if not quality_report.is_clean:
    st.sidebar.warning(
        f"Data quality: {len(quality_report.rejected_rows)} rows rejected, "
        f"{len(quality_report.defaulted)} defaults applied."
    )

if session.index is None:
    st.title("🧩 Planogram Guide")
    st.info("Select a store to begin.")
    st.stop()


# ═══════════════════════════════════════════════════════════════════════════
# Search / scan
# ═══════════════════════════════════════════════════════════════════════════

st.title(f"🧩 POG {session.planogram_id}")

search_col, mode_col = st.columns([3, 1])
with mode_col:
    scanner_mode = st.toggle("Scanner input", value=False, key="scanner_mode",
                             help="On for a barcode scanner acting as a keyboard.")
with search_col:
    with st.form("search_form", clear_on_submit=True):
        query = st.text_input("UPC (full code or last digits)", key="query")
        submitted = st.form_submit_button("Search", key="search")

if submitted and query:
    outcome = session.handle_query(query, from_scanner=scanner_mode)
    st.session_state["scan_message"] = outcome.display_text
    st.session_state["scan_status"] = outcome.status
    st.session_state["highlight_id"] = (
        outcome.step.highlight_placement_id if outcome.step else None
    )

status = st.session_state.get("scan_status")
message = st.session_state.get("scan_message", "")
if status is QueryStatus.DELETE:
    st.error(f"🗑️ {message} — this product is on the delete list, do not place it.")
elif status is QueryStatus.NOT_FOUND:
    st.warning(message)
elif message:
    st.success(message)

if session.cursor.state is CursorState.MULTI:
    prev_col, label_col, next_col = st.columns([1, 2, 1])
    if prev_col.button("◀ Prev match"):
        step = session.advance_match(-1)
        st.session_state["highlight_id"] = step.highlight_placement_id if step else None
        st.rerun()
    label_col.markdown(f"**{session.cursor.label()}**")
    if next_col.button("Next match ▶"):
        step = session.advance_match(1)
        st.session_state["highlight_id"] = step.highlight_placement_id if step else None
        st.rerun()


# ═══════════════════════════════════════════════════════════════════════════
# Bay navigation & board
# ═══════════════════════════════════════════════════════════════════════════

if session.current_bay is None:
    st.info("No items found for this Planogram.")
    st.stop()

left_col, bay_col, right_col = st.columns([1, 2, 1])
if left_col.button("◀ Prev bay") and session.change_bay(-1):
    st.rerun()
bay_col.markdown(f"### {session.bays.bay_label()}")
if right_col.button("Next bay ▶") and session.change_bay(1):
    st.rerun()

done, total = session.progress(session.current_bay)
st.progress(session.tracker.progress_percent(session.current_bay) / 100,
            text=f"{done}/{total}")

ppi = fit_pixels_per_inch(
    available_width,
    available_height,
    BOARD_WIDTH_INCHES,
    BOARD_HEIGHT_INCHES,
    margin_px=CANVAS_MARGIN_PX,
)
placed = layout_bay(session.index, session.current_bay, ppi)

board_col, list_col = st.columns([3, 2])
with board_col:
    st.markdown(
        render_board(
            placed,
            ppi,
            session.tracker.completed_ids,
            file_index=planogram_data.file_index,
            highlight_id=st.session_state.get("highlight_id"),
            image_url=_file_url,
        ),
        unsafe_allow_html=True,
    )

with list_col:
    st.subheader("Placements")
    for item in placed:
        record = item.record
        key = _done_key(record.placement_id)
        # Scans and "clear all" change the tracker outside the widget.
        st.session_state[key] = session.tracker.is_complete(record.placement_id)
        st.checkbox(
            f"#{record.position} · {record.upc} · {record.description or 'no description'}",
            key=key,
            on_change=_on_done_toggled,
            args=(record.placement_id,),
        )


# ═══════════════════════════════════════════════════════════════════════════
# Planogram tools
# ═══════════════════════════════════════════════════════════════════════════

st.divider()
tools = st.columns(3)

pdf_file = find_planogram_pdf(planogram_data.file_index, session.planogram_id)
if pdf_file:
    tools[0].link_button("📄 Open planogram PDF", _file_url(pdf_file))
else:
    tools[0].caption("PDF not found for this planogram.")

with tempfile.TemporaryDirectory() as temp_dir:
    export_path = export_progress(
        placements=placements_table(session.index, session.tracker.completed_ids),
        summary=bay_summary(session.index, session.tracker.completed_ids),
        quality_report=quality_report,
        store_id=session.store_id,
        output_path=Path(temp_dir) / f"progress_{session.store_id}.xlsx",
    )
    tools[1].download_button(
        "📥 Download progress",
        data=export_path.read_bytes(),
        file_name=export_path.name,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

if tools[2].button("🧹 Clear all progress", key="clear_progress"):
    session.clear_progress()
    st.rerun()
