"""Worker that executes a recompute request on a background thread."""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, Signal

from ..core.raster import Raster

LOGGER = logging.getLogger(__name__)


class RenderSignals(QObject):
    """Signals emitted by :class:`RenderWorker`."""

    finished = Signal(object, int)
    """Emitted with the rendered :class:`Raster` and the request sequence number."""

    error = Signal(int, str)
    """Emitted if an unexpected exception aborts the render."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class RenderWorker(QRunnable):
    """Run a pipeline or preset render for one sequence-tagged request.

    The worker only computes; deciding whether the result is still wanted is
    left to the receiver, which compares the sequence number it gets back.
    """

    def __init__(self, render: Callable[[], Raster], sequence: int) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._render = render
        self._sequence = int(sequence)
        self.signals = RenderSignals()

    @property
    def sequence(self) -> int:
        return self._sequence

    def run(self) -> None:  # type: ignore[override]
        """Render the frame and notify listeners when done."""

        try:
            result = self._render()
        except Exception as exc:
            LOGGER.exception("Render request %d failed", self._sequence)
            self.signals.error.emit(self._sequence, str(exc))
            return
        self.signals.finished.emit(result, self._sequence)


__all__ = ["RenderSignals", "RenderWorker"]
