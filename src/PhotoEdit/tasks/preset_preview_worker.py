"""Background worker that renders the preset strip thumbnails off the GUI thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ..core.presets import PresetEngine
from ..core.raster import Raster

LOGGER = logging.getLogger(__name__)


class PresetPreviewSignals(QObject):
    """Signals emitted by :class:`PresetPreviewWorker`."""

    preview_ready = Signal(str, object, int)
    """Emitted with the preset name, its thumbnail :class:`Raster` and the generation id."""

    finished = Signal(int)
    """Emitted after every preset has been processed."""

    error = Signal(int, str)
    """Emitted if an unexpected exception aborts the worker."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class PresetPreviewWorker(QRunnable):
    """Downscale the source once and apply every preset to the thumbnail."""

    def __init__(
        self,
        engine: PresetEngine,
        source: Raster,
        *,
        max_edge: int,
        generation_id: int,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        # Rasters are immutable, so sharing the source with the GUI thread is safe.
        self._engine = engine
        self._source = source
        self._max_edge = max(1, int(max_edge))
        self._generation_id = generation_id
        self.signals = PresetPreviewSignals()

    # ------------------------------------------------------------------
    def run(self) -> None:  # type: ignore[override]
        """Execute the preview loop on a background thread."""

        try:
            base = self._source.thumbnail(self._max_edge)
            for name in self._engine.names:
                preview = self._engine.apply_preset(name, base)
                self.signals.preview_ready.emit(name, preview, self._generation_id)
        except Exception as exc:
            LOGGER.exception("Preset preview generation failed")
            self.signals.error.emit(self._generation_id, str(exc))
        finally:
            self.signals.finished.emit(self._generation_id)


__all__ = ["PresetPreviewSignals", "PresetPreviewWorker"]
