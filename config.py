# config.py

import logging
import os

# -----------------------------
# Process defaults
# -----------------------------
DEFAULT_BURST_TIME = 4
DEFAULT_ARRIVAL_TIME = 0
DEFAULT_PRIORITY = 1

# -----------------------------
# Scheduling
# -----------------------------
DEFAULT_QUANTUM = 2

# -----------------------------
# Page replacement
# -----------------------------
MIN_FRAMES = 1
MAX_FRAMES = 10
DEFAULT_FRAME_COUNT = 3

# Belady's anomaly under FIFO: 3 frames -> 9 faults, 4 frames -> 10 faults
DEFAULT_REFERENCE_STRING = "1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5"

# -----------------------------
# Playback / logging
# -----------------------------
PLAYBACK_INTERVAL = float(os.environ.get("OSVIS_PLAYBACK_INTERVAL", "1.0"))
LOG_LEVEL = os.environ.get("OSVIS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level=None):
    """Configure root logging once for the app process."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
