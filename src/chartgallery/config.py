"""
Configuration & Path Management
===============================
Central registry for resource paths, chart defaults and the icon provider.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (toolbar icons) when the app is frozen into an executable.
3. Injection: Widgets receive an AssetProvider instead of looking icons up
   through global state, so tests and embedders can supply their own.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    ICONS_PATH (str): Absolute path to the toolbar icons directory.
    DEFAULT_* : Initial values for a freshly constructed chart.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Protocol

from chartgallery.model.surface import InterpolationMethod
from chartgallery.model.ternary_geometry import Direction

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/chartgallery/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
ICONS_PATH: str = os.path.join(ASSETS_PATH, "icons")

# Ternary chart defaults
DEFAULT_GRID_RESOLUTION: int = 10
DEFAULT_TICK_RATE: int = 1
DEFAULT_DIRECTION: Direction = Direction.CLOCKWISE
DEFAULT_INTERPOLATION: InterpolationMethod = InterpolationMethod.BIHARMONIC
DEFAULT_LABELS: tuple[str, str, str, str] = ("A", "B", "C", "Z")

# Line selector defaults
DEFAULT_SELECTED_COLOR: tuple[float, float, float] = (0.0, 0.447, 0.741)
DEFAULT_TRACE_COLOR: tuple[float, float, float] = (0.5, 0.5, 0.5)
DEFAULT_SELECTED_LINE_WIDTH: float = 3.0
DEFAULT_TRACE_LINE_WIDTH: float = 1.5

# Default axis colour, restored when a line selection is cleared
DEFAULT_AXIS_COLOR: tuple[float, float, float] = (0.15, 0.15, 0.15)

# Debounce interval between a mutation and the next redraw
REDRAW_INTERVAL_MS: int = 50


class AssetProvider(Protocol):
    """Resolves toolbar icon names (e.g. "cog", "reset") to file paths."""

    def icon_path(self, name: str) -> Optional[str]: ...


class FileAssetProvider:
    """Looks icons up as ``<root>/<name>.png``. Missing icons resolve to None."""

    def __init__(self, root: str = ICONS_PATH) -> None:
        self.root = root

    def icon_path(self, name: str) -> Optional[str]:
        path = os.path.join(self.root, f"{name}.png")
        if not os.path.exists(path):
            logger.debug(f"Icon '{name}' not found at {path}")
            return None
        return path
