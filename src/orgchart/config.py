"""
Configuration & Path Management
===============================
Central registry for file paths and the geometry/interaction constants of the
organizational chart.

Why is this file needed?
------------------------
1. Abstraction: Card sizes, spacings and zoom limits are shared by the layout
   engine, the controllers and the renderer. Keeping them here prevents the
   numbers from drifting apart.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (sample data) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    SAMPLE_UNITS_PATH (str): Absolute path to the bundled sample unit tree.
"""
import sys
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/orgchart/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# --- Layout (world units) ---
NODE_WIDTH: float = 280.0
NODE_HEIGHT: float = 120.0
HORIZONTAL_SPACING: float = 40.0
VERTICAL_SPACING: float = 80.0
DIAGRAM_MARGIN: float = 40.0

# --- Rendering ---
GRID_PITCH: float = 20.0
HEADER_HEIGHT: float = 32.0
CORNER_RADIUS: float = 8.0

# --- Viewport ---
MIN_SCALE: float = 0.2
MAX_SCALE: float = 2.0
ZOOM_STEP: float = 1.2
WHEEL_ZOOM_IN: float = 1.1
WHEEL_ZOOM_OUT: float = 0.9
FIT_PADDING: float = 0.9

# --- Interaction (screen pixels) ---
CLICK_THRESHOLD_PX: float = 4.0

# --- Paths ---
ASSETS_PATH: str = get_resource_path("assets")
SAMPLE_UNITS_PATH: str = os.path.join(ASSETS_PATH, "sample_units.json")

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
