"""
CSV loader — reads the planogram data files and builds the record set.

Four sources, read from a local data directory or fetched from a base URL:

  - githubfiles.csv          file index, one filename per line   (required)
  - allplanogramdata.csv     planogram placements                (required)
  - Store_POG_Mapping.csv    store → planogram                   (required)
  - deletelist.csv           UPCs not to place                   (optional)

Every CSV is read as text (dtype=str, no NA conversion) so UPCs keep their
leading zeros.  Headers go through column_mapper; rows go through
record_parser.  A missing required file or a missing required column raises
DataLoadError; a missing delete list just means an empty delete list.

Public API:
    load_planogram_data(data_dir=None, base_url=None) → PlanogramData
    read_csv_text(text, source_name, target_columns, required) → DataFrame
    DataLoadError
"""

import io
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
import requests

from analysis.models import DeleteListEntry, PlacementRecord, StoreMapping
from config.column_mapping import (
    DELETE_LIST_COLUMNS,
    PLANOGRAM_COLUMNS,
    REQUIRED_DELETE_LIST_COLUMNS,
    REQUIRED_PLANOGRAM_COLUMNS,
    STORE_MAPPING_COLUMNS,
)
from config.settings import (
    DELETE_LIST_FILENAME,
    FETCH_TIMEOUT_SECONDS,
    FILE_INDEX_FILENAME,
    PLANOGRAM_FILENAME,
    STORE_MAPPING_FILENAME,
)
from processing.column_mapper import map_columns
from processing.file_index import parse_file_index
from processing.record_parser import (
    PlacementParseResult,
    parse_delete_rows,
    parse_placement_rows,
    parse_store_rows,
)

logger = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    """Raised when a required data file or column is missing."""


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class PlanogramData:
    """Everything loaded at startup; read-only for the rest of the session."""

    records: list[PlacementRecord] = field(default_factory=list)
    store_mappings: list[StoreMapping] = field(default_factory=list)
    delete_entries: list[DeleteListEntry] = field(default_factory=list)
    file_index: list[str] = field(default_factory=list)
    parse_result: PlacementParseResult = field(default_factory=PlacementParseResult)
    warnings: list[str] = field(default_factory=list)

    def lookup_store(self, store_id: str) -> str | None:
        """Planogram id for *store_id*, or None when the store is unknown."""
        wanted = store_id.strip()
        for mapping in self.store_mappings:
            if mapping.store_id == wanted:
                return mapping.planogram_id
        return None


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def load_planogram_data(
    data_dir: Path | None = None,
    base_url: str | None = None,
) -> PlanogramData:
    """
    Load all planogram data files.

    Exactly one of *data_dir* / *base_url* is used; *base_url* wins when both
    are given.

    Raises:
        DataLoadError: a required file is missing or unreadable, or a
                       required column cannot be found.
    """
    if data_dir is None and not base_url:
        raise DataLoadError("No data directory or base URL configured")

    def fetch(filename: str) -> str | None:
        if base_url:
            return _fetch_remote(base_url, filename)
        return _read_local(Path(data_dir), filename)

    files_text = fetch(FILE_INDEX_FILENAME)
    planogram_text = fetch(PLANOGRAM_FILENAME)
    mapping_text = fetch(STORE_MAPPING_FILENAME)

    for filename, text in (
        (FILE_INDEX_FILENAME, files_text),
        (PLANOGRAM_FILENAME, planogram_text),
        (STORE_MAPPING_FILENAME, mapping_text),
    ):
        if text is None:
            raise DataLoadError(f"{filename} not found")

    data = PlanogramData()
    data.file_index = parse_file_index(files_text)

    planogram_df = read_csv_text(
        planogram_text, PLANOGRAM_FILENAME, PLANOGRAM_COLUMNS, REQUIRED_PLANOGRAM_COLUMNS
    )
    data.parse_result = parse_placement_rows(planogram_df)
    data.records = data.parse_result.records

    mapping_df = read_csv_text(
        mapping_text, STORE_MAPPING_FILENAME, STORE_MAPPING_COLUMNS, STORE_MAPPING_COLUMNS
    )
    data.store_mappings = parse_store_rows(mapping_df)

    data.delete_entries = _load_delete_list(fetch(DELETE_LIST_FILENAME), data.warnings)

    logger.info(
        f"Loaded: {len(data.file_index)} files, {len(data.records)} products, "
        f"{len(data.store_mappings)} store mappings, "
        f"{len(data.delete_entries)} delete-list entries"
    )
    return data


def read_csv_text(
    text: str,
    source_name: str,
    target_columns: list[str],
    required: list[str],
) -> pd.DataFrame:
    """
    Parse CSV text and rename its headers to canonical column names.

    Unmapped columns are dropped.  Quoted fields are handled by pandas.

    Raises:
        DataLoadError: the text is not CSV, or a required column is missing.
    """
    try:
        dataframe = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        dataframe = pd.DataFrame()
    except pd.errors.ParserError as exc:
        raise DataLoadError(f"Cannot parse {source_name}: {exc}") from exc

    mapping = map_columns([str(c) for c in dataframe.columns], target_columns)
    missing = mapping.missing(required)
    if missing:
        raise DataLoadError(
            f"{source_name} is missing required column(s): {', '.join(missing)}"
        )

    renames = mapping.renames()
    dataframe = dataframe[list(renames)].rename(columns=renames)
    dataframe = dataframe.apply(lambda col: col.str.strip())

    logger.info(f"Read {len(dataframe)} rows from {source_name}")
    return dataframe


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _load_delete_list(text: str | None, warnings: list[str]) -> list[DeleteListEntry]:
    """The delete list is optional: absent or malformed means empty."""
    if text is None:
        logger.info(f"No {DELETE_LIST_FILENAME} — delete list is empty")
        return []

    try:
        dataframe = read_csv_text(
            text, DELETE_LIST_FILENAME, DELETE_LIST_COLUMNS, REQUIRED_DELETE_LIST_COLUMNS
        )
    except DataLoadError as exc:
        message = f"Ignoring delete list: {exc}"
        logger.warning(message)
        warnings.append(message)
        return []

    return parse_delete_rows(dataframe)


def _read_local(data_dir: Path, filename: str) -> str | None:
    path = data_dir / filename
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise DataLoadError(f"Cannot read '{path}': {exc}") from exc


def _fetch_remote(base_url: str, filename: str) -> str | None:
    """GET base_url/filename with a cache-busting timestamp; None on 404."""
    url = f"{base_url.rstrip('/')}/{filename}"
    try:
        response = requests.get(
            url,
            params={"t": int(time.time() * 1000)},
            timeout=FETCH_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        raise DataLoadError(f"Cannot fetch {filename}: {exc}") from exc

    if response.status_code == 404:
        return None
    if not response.ok:
        raise DataLoadError(f"Cannot fetch {filename}: HTTP {response.status_code}")

    return response.text
