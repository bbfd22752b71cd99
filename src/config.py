"""
Slot Timeline Configuration
"""
from pathlib import Path

# Time grid
SNAP_STEP = 0.05  # 50ms
MIN_LEN = 0.1     # 100ms, shortest legal slot
TIME_EPSILON = 1e-6

# Slot categories and their display colours
KIND_NAMES = ["dialogue", "music", "sfx", "fx", "note"]
KIND_COLORS = {
    "dialogue": "#7c4bd9",
    "music": "#5ad1b3",
    "sfx": "#ffd166",
    "fx": "#8ecae6",
    "note": "#b598ff",
}

# Auto-assigned colours for slots without a recognised category
AUTO_COLORS = ["#7c4bd9", "#b598ff", "#ff8fa3", "#5ad1b3", "#ffd166", "#8ecae6"]

# Built-in participant chips when the caller supplies none
DEFAULT_CAST_PALETTE = [
    "Hannah",
    "Mert",
    "Ayşe",
    "John",
    "SFX-Drone",
    "Crowd",
]
MAX_PARTICIPANTS = 16

# Palette drop geometry (pixels)
DROP_DEFAULT_LEFT_PX = 20
DROP_DEFAULT_RIGHT_PX = 40
DROP_MIN_PREVIEW_PX = 8
DROP_PREVIEW_OFFSET_PX = 30  # initial width of a hover preview

# Interaction
EDGE_HANDLE_PX = 6
NUDGE_STEP = 0.1
NUDGE_STEP_LARGE = 0.5
QUICK_ADD_SECONDS = 2.0
DUPLICATE_GAP = 0.05

# Persistence
STORE_FILENAME = "timelines.json"

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_STORE_PATH = PROJECT_ROOT / "data" / STORE_FILENAME
