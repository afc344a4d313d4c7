"""
Reactive Component State
========================
The Clean/Dirty lifecycle every chart follows.

Why is this file needed?
------------------------
Recomputing a triangulated surface is expensive, restyling a line is not. Charts
therefore split their properties in two:

1. Recompute-affecting mutators call ``mark_dirty()``. The transition is
   synchronous and unconditional.
2. Cosmetic mutators write straight through to the already-materialized visuals
   and never touch the flag.

The render driver calls ``chart.update()`` before every redraw. Only a complete
regeneration (``run_update``) clears the flag; if it raises, the chart stays
Dirty so the next update retries from scratch.

Classes:
    ComponentState: Qt-aware holder of the dirty flag with change signals.
    Chart: Structural protocol shared by all chart kinds.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Protocol, runtime_checkable

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


@runtime_checkable
class Chart(Protocol):
    """What the render driver needs from any chart."""

    def mark_dirty(self) -> None: ...

    @property
    def is_dirty(self) -> bool: ...

    def update(self) -> bool: ...


class ComponentState(QObject):
    """
    Dirty flag with change notification.

    Signals:
        dirty_changed(bool): Emitted on every Clean <-> Dirty transition.
        updated(): Emitted after a successful regeneration.
        style_changed(str): Emitted by cosmetic setters with the property name.
    """
    dirty_changed = Signal(bool)
    updated = Signal()
    style_changed = Signal(str)

    def __init__(self, dirty: bool = True) -> None:
        super().__init__()
        # A fresh chart has nothing materialized yet
        self._dirty: bool = dirty
        self._transaction_depth: int = 0
        self._dirty_at_start: bool = dirty

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        """Clean -> Dirty. Idempotent; emits only on an actual transition."""
        was_dirty = self._dirty
        self._dirty = True
        if not was_dirty and self._transaction_depth == 0:
            self.dirty_changed.emit(True)

    def run_update(self, regenerate: Callable[[], None]) -> bool:
        """
        Run ``regenerate`` if Dirty and clear the flag once it returns.

        Exceptions from ``regenerate`` propagate and leave the state Dirty.

        Returns:
            True if a regeneration ran, False if the state was already Clean.
        """
        if not self._dirty:
            return False

        regenerate()

        self._dirty = False
        self.dirty_changed.emit(False)
        self.updated.emit()
        return True

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Group several writes into one externally visible step.

        Signals are held back until the outermost transaction exits, so a
        listener never observes an intermediate state (e.g. permuted data with
        stale labels).
        """
        if self._transaction_depth == 0:
            self._dirty_at_start = self._dirty
        self._transaction_depth += 1
        try:
            yield
        finally:
            self._transaction_depth -= 1
            if self._transaction_depth == 0 and self._dirty and not self._dirty_at_start:
                self.dirty_changed.emit(True)
