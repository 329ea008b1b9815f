"""
Configuration constants for the colour tuner.

All tunable settings in one place.
"""

import os

# =============================================================================
# SLIDER PAIRS (OpenCV HSV: H = 0-179, S = 0-255, V = 0-255)
# =============================================================================

# (lower key, upper key, domain limit)
SLIDER_PAIRS = (
    ("hueMin", "hueMax", 179),
    ("satMin", "satMax", 255),
    ("valMin", "valMax", 255),
)

# Values the controls hold before the snapshot arrives
DEFAULT_VALUES = {
    "hueMin": 0,
    "hueMax": 179,
    "satMin": 0,
    "satMax": 255,
    "valMin": 0,
    "valMax": 255,
}

# =============================================================================
# REMOTE AUTHORITY
# =============================================================================

BASE_URL = os.environ.get("COLOUR_TUNER_URL", "http://localhost:8080")

SLIDER_PATH = "/api/slider"
SUBMIT_PATH = "/api/submitColour"

# Artifacts re-fetched after every accepted write
ORIGINAL_IMAGE = "originalImage"
MODIFIED_IMAGE = "modifiedImage"
ARTIFACT_NAMES = (ORIGINAL_IMAGE, MODIFIED_IMAGE)

# Seconds to wait for pending writes on shutdown
SHUTDOWN_DRAIN_TIMEOUT = 2.0

# =============================================================================
# COMMIT / SNIPPET
# =============================================================================

DEFAULT_COLOUR_NAME = "MyColour"

# =============================================================================
# PREVIEW WINDOW
# =============================================================================

CONTROLS_WINDOW = "Trackbars"
ORIGINAL_WINDOW = "Original"
MODIFIED_WINDOW = "Modified"
UI_POLL_INTERVAL = 0.01  # seconds between HighGUI event pumps
