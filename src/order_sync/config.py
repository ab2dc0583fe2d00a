"""
Configuration for the order sheet sync.

Values come from the environment (a ``.env`` file in the working directory
is loaded first). The list of sheet sources is static and lives in
``order_sync.sync``.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DB_PATH = Path(os.getenv("ORDER_SYNC_DB_PATH", str(PROJECT_ROOT / "data" / "orders.sqlite3")))
SETTINGS_PATH = Path(os.getenv("ORDER_SYNC_SETTINGS_PATH", str(PROJECT_ROOT / "data" / "settings.json")))

# Google Sheets export endpoint
EXPORT_URL_TEMPLATE = os.getenv(
    "ORDER_SYNC_EXPORT_URL",
    "https://docs.google.com/spreadsheets/d/{remote_id}/export?format=csv&gid={tab_id}",
)
USER_AGENT = os.getenv(
    "ORDER_SYNC_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
)
_fetch_timeout = os.getenv("ORDER_SYNC_FETCH_TIMEOUT")
FETCH_TIMEOUT = float(_fetch_timeout) if _fetch_timeout else None

MODEL_Y_SPREADSHEET_ID = os.getenv("MODEL_Y_SPREADSHEET_ID", "1--3lNLMSUDwxgcpqrYh4Fbz8LONLBfbJwOIftKgzaSA")
MODEL_3_SPREADSHEET_ID = os.getenv("MODEL_3_SPREADSHEET_ID", "10fQS1HdBFnvSEVDyP8ofgXerxT1RVoVYUJfagyn95DA")
