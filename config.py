"""
CARPARTS - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR      = Path(__file__).resolve().parent
DATA_DIR      = Path(os.environ.get("CARPARTS_DATA_DIR", BASE_DIR / "data"))
SEED_PATH     = Path(os.environ.get("CARPARTS_SEED_PATH", BASE_DIR / "public" / "carparts.csv"))

# ── Seed asset ─────────────────────────────────────────────────────────
# SEED_PATH is a snapshot image, or a .csv sheet built into one on load.
# When SEED_URL is set, the snapshot is downloaded instead.
SEED_URL      = os.environ.get("CARPARTS_SEED_URL", "")
LOAD_TIMEOUT  = float(os.environ.get("CARPARTS_LOAD_TIMEOUT", "15"))

# ── Persistent snapshot ────────────────────────────────────────────────
SNAPSHOT_KEY  = os.environ.get("CARPARTS_SNAPSHOT_KEY", "carparts.db")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL     = os.environ.get("CARPARTS_LOG_LEVEL", "WARNING").upper()

# ── Import ─────────────────────────────────────────────────────────────
CSV_DELIMITER = os.environ.get("CARPARTS_CSV_DELIMITER", ",")
