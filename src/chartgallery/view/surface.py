"""
Rendering Surface
=================
The contract between charts and whatever draws them.

Classes:
    RenderSurface: Protocol implemented by every backend.
    HeadlessSurface: In-memory backend; the default when nothing is injected.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Protocol

from chartgallery.core.visuals import Visual, style_of

logger = logging.getLogger(__name__)


class RenderSurface(Protocol):
    def show(self, visual: Visual) -> None:
        """Create the visual, or replace the one with the same name."""
        ...

    def restyle(self, visual: Visual) -> None:
        """Apply only the style fields of an already-shown visual."""
        ...

    def remove(self, name: str) -> None: ...

    def redraw(self) -> None: ...


class HeadlessSurface:
    """
    Keeps the latest state of every visual by name and counts redraws.

    Useful for tests and for running charts without a display.
    """

    def __init__(self) -> None:
        self.visuals: dict[str, Visual] = {}
        self.redraw_count: int = 0
        self.show_count: int = 0
        self.restyle_count: int = 0

    def show(self, visual: Visual) -> None:
        self.visuals[visual.name] = visual
        self.show_count += 1

    def restyle(self, visual: Visual) -> None:
        current = self.visuals.get(visual.name)
        if current is None:
            # Nothing materialized yet; the next update() will show it
            return
        self.visuals[visual.name] = replace(current, **style_of(visual))
        self.restyle_count += 1

    def remove(self, name: str) -> None:
        self.visuals.pop(name, None)

    def redraw(self) -> None:
        self.redraw_count += 1

    def get(self, name: str) -> Optional[Visual]:
        return self.visuals.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.visuals
