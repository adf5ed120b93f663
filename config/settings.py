"""
Application settings: data source filenames, persisted state keys, and
scan handling.

Deployment-specific values (local data directory or remote base URL) are read
from Streamlit secrets in app.py; everything here is a fixed default.
"""

# ---------------------------------------------------------------------------
# Data sources (relative to the data directory or base URL)
# ---------------------------------------------------------------------------
FILE_INDEX_FILENAME: str = "githubfiles.csv"
PLANOGRAM_FILENAME: str = "allplanogramdata.csv"
STORE_MAPPING_FILENAME: str = "Store_POG_Mapping.csv"
DELETE_LIST_FILENAME: str = "deletelist.csv"

# Request timeout (seconds) when data is fetched over HTTP.
FETCH_TIMEOUT_SECONDS: int = 10

# ---------------------------------------------------------------------------
# Persisted key/value state
# ---------------------------------------------------------------------------
COMPLETION_STATE_KEY: str = "harpa_complete"
STORE_STATE_KEY: str = "harpa_store"
STATE_FILENAME: str = "planogram_state.json"

# ---------------------------------------------------------------------------
# Scan handling
# ---------------------------------------------------------------------------
# Repeated decoder callbacks with the same payload inside this window are
# dropped at the session boundary.
SCAN_DEBOUNCE_SECONDS: float = 1.5

# A scan that resolves to exactly one placement marks it complete.
AUTO_COMPLETE_ON_SCAN: bool = True
