"""Central configuration for paths and constants."""

import os
from pathlib import Path

# Data directory — override with CLAUDEVIEWER_DATA_DIR env var
DATA_DIR = Path(
    os.environ.get("CLAUDEVIEWER_DATA_DIR", str(Path.home() / ".claudeviewer"))
)

# Persistent store
STORE_PATH = DATA_DIR / "store.db"
STORAGE_KEY = "conversations"  # Well-known key holding the whole collection

# Display labels per sender
SENDER_LABELS = {"human": "User", "assistant": "Claude"}

# Ordering rank for messages sharing a timestamp (lower sorts first)
SENDER_RANK = {"human": 0, "assistant": 1}
