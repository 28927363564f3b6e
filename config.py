"""weblog configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

# --- Paths ---
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.getenv("WEBLOG_DB_PATH", str(DATA_DIR / "weblog.db")))

# --- Database ---
# Every statement goes through this many connections. 1 keeps a single writer.
DB_POOL_SIZE: int = int(os.getenv("WEBLOG_DB_POOL_SIZE", "1"))

# --- API ---
API_HOST = "127.0.0.1"
API_PORT = 8080
WEBLOG_PASSWORD: str = os.getenv("WEBLOG_PASSWORD", "password")
CREATE_SAMPLE: bool = os.getenv("WEBLOG_SAMPLE", "") in ("1", "true", "yes")

# --- Pagination ---
PAGE_DEFAULT_LIMIT: int = 10
PAGE_MAX_LIMIT: int = 50

# --- URL previews ---
PREVIEW_FETCH_TIMEOUT: float = 15.0
# 0 means a cached preview never goes stale
PREVIEW_MAX_AGE_DAYS: int = int(os.getenv("WEBLOG_PREVIEW_MAX_AGE_DAYS", "0"))
PREVIEW_USER_AGENT = "Mozilla/5.0 (compatible; weblog-preview/0.1)"
