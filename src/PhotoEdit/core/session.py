"""Editing session: source image, adjustment values and the rendered result."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from .. import config
from ..tasks.preset_preview_worker import PresetPreviewWorker
from ..tasks.render_worker import RenderWorker
from .adjustments import AdjustmentParameters, clamp_value, display_percent, ensure_known
from .filters import AdjustmentPipeline
from .presets import PresetEngine
from .raster import Raster, decode_raster

_LOGGER = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a :class:`Session`."""

    EMPTY = "empty"
    LOADED = "loaded"
    EDITED = "edited"


class Session(QObject):
    """Own the source raster, the current adjustments and the derived raster.

    All public methods must be called from the thread that owns the session.
    ``set_parameter`` and ``apply_preset`` return immediately with a sequence
    number; the render runs on the thread pool and its result is applied only
    if no newer request has landed first.  ``load`` and ``revert`` act
    synchronously and invalidate every render still in flight.
    """

    imageChanged = Signal(object)
    """Emitted with the new derived :class:`Raster` whenever it is replaced."""

    stateChanged = Signal(object)
    """Emitted with the new :class:`SessionState`."""

    valueChanged = Signal(str, float)
    """Emitted with the parameter name and the clamped value that was stored."""

    resetPerformed = Signal()
    """Emitted after load or revert restored the default adjustments."""

    renderFailed = Signal(int, str)
    """Emitted with the request sequence and message when a worker aborts."""

    presetPreviewReady = Signal(str, object)
    """Emitted with a preset name and its thumbnail :class:`Raster`."""

    def __init__(
        self,
        parent: Optional[QObject] = None,
        *,
        pipeline: Optional[AdjustmentPipeline] = None,
        presets: Optional[PresetEngine] = None,
        thread_pool: Optional[QThreadPool] = None,
    ) -> None:
        super().__init__(parent)
        self._pipeline = pipeline or AdjustmentPipeline()
        self._presets = presets or PresetEngine()
        if thread_pool is None:
            thread_pool = QThreadPool(self)
            thread_pool.setMaxThreadCount(config.RENDER_MAX_THREADS)
        self._thread_pool = thread_pool

        self._source: Optional[Raster] = None
        self._derived: Optional[Raster] = None
        self._parameters = AdjustmentParameters()
        self._state = SessionState.EMPTY

        self._sequence = 0
        self._applied_sequence = 0
        self._pending: dict[int, SessionState] = {}
        # Workers are kept alive until they report back so their signal objects survive.
        self._active_workers: dict[int, RenderWorker] = {}

        self._preview_generation = 0
        self._active_preview_workers: dict[int, PresetPreviewWorker] = {}

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def parameters(self) -> AdjustmentParameters:
        return self._parameters

    @property
    def sequence(self) -> int:
        """Number of recompute requests issued over the session's lifetime."""

        return self._sequence

    @property
    def is_rendering(self) -> bool:
        return bool(self._pending)

    @property
    def preset_names(self) -> tuple[str, ...]:
        return self._presets.names

    def current_image(self) -> Optional[Raster]:
        """Return the derived raster shown to the user and handed to export."""

        return self._derived

    def source_image(self) -> Optional[Raster]:
        return self._source

    def value(self, name: str) -> float:
        return self._parameters.value(name)

    def display_value(self, name: str) -> int:
        """Return the ``[0, 100]`` percentage shown beside the slider for *name*."""

        return display_percent(name, self._parameters.value(name))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def load(self, data: bytes) -> None:
        """Decode *data* and make it the new source image.

        Raises :class:`~PhotoEdit.errors.DecodeError` when the bytes are not an
        image; the session is left exactly as it was.
        """

        raster = decode_raster(data)
        self.load_raster(raster)

    def load_raster(self, raster: Raster) -> None:
        """Adopt an already decoded *raster* as the new source image."""

        self._source = raster
        self._preview_generation += 1
        self._reset_to_source()
        _LOGGER.info("Loaded %dx%d image", raster.width, raster.height)

    def revert(self) -> None:
        """Drop every adjustment and preset, showing the source image again."""

        if self._source is None:
            return
        self._reset_to_source()
        _LOGGER.debug("Reverted to source image")

    def set_parameter(self, name: str, value: float) -> Optional[int]:
        """Clamp and store *value* for *name* and schedule a re-render.

        Returns the sequence number of the render request, or ``None`` when no
        image is loaded.  Raises :class:`~PhotoEdit.errors.UnknownParameterError`
        for names outside the adjustment schema.
        """

        ensure_known(name)
        if self._source is None:
            _LOGGER.debug("Ignoring %s change without a loaded image", name)
            return None

        stored = clamp_value(name, value)
        self._parameters = self._parameters.with_value(name, stored)
        self.valueChanged.emit(name, stored)

        source = self._source
        parameters = self._parameters
        target = SessionState.LOADED if parameters.is_default() else SessionState.EDITED
        return self._submit(lambda: self._pipeline.render(source, parameters), target)

    def apply_preset(self, name: str) -> Optional[int]:
        """Schedule the preset *name* against the source image.

        The adjustment values are left untouched, so a later slider change
        re-renders from the source and the preset look is dropped.
        """

        if self._source is None:
            _LOGGER.debug("Ignoring preset %r without a loaded image", name)
            return None

        source = self._source
        target = SessionState.LOADED if self._presets.is_identity(name) else SessionState.EDITED
        return self._submit(lambda: self._presets.apply_preset(name, source), target)

    def request_preset_previews(
        self,
        max_edge: int = config.PRESET_THUMBNAIL_EDGE,
    ) -> Optional[int]:
        """Render a thumbnail for every preset in the background.

        Each thumbnail arrives through :attr:`presetPreviewReady`.  Returns the
        generation id of the batch, or ``None`` without a loaded image.
        """

        if self._source is None:
            return None

        self._preview_generation += 1
        generation = self._preview_generation
        worker = PresetPreviewWorker(
            self._presets,
            self._source,
            max_edge=max_edge,
            generation_id=generation,
        )
        worker.signals.preview_ready.connect(self._handle_preset_preview)
        worker.signals.finished.connect(self._handle_preview_finished)
        self._active_preview_workers[generation] = worker
        self._thread_pool.start(worker)
        return generation

    def wait_for_renders(self, msecs: int = -1) -> bool:
        """Block until the pool is idle; results still arrive via the event loop."""

        return self._thread_pool.waitForDone(msecs)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _reset_to_source(self) -> None:
        # Raising the floor to the latest sequence discards every render in flight.
        self._applied_sequence = self._sequence
        self._pending.clear()
        self._parameters = AdjustmentParameters()
        self._derived = self._source
        self.resetPerformed.emit()
        self.imageChanged.emit(self._derived)
        self._set_state(SessionState.LOADED)

    def _submit(self, render: Callable[[], Raster], target: SessionState) -> int:
        self._sequence += 1
        sequence = self._sequence
        worker = RenderWorker(render, sequence)
        worker.signals.finished.connect(self._handle_render_finished)
        worker.signals.error.connect(self._handle_render_failed)
        self._pending[sequence] = target
        self._active_workers[sequence] = worker
        self._thread_pool.start(worker)
        return sequence

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        self._state = state
        self.stateChanged.emit(state)

    @Slot(object, int)
    def _handle_render_finished(self, raster: Raster, sequence: int) -> None:
        self._active_workers.pop(sequence, None)
        target = self._pending.pop(sequence, None)
        if target is None or sequence <= self._applied_sequence:
            _LOGGER.debug(
                "Discarding stale render %d (latest applied %d)",
                sequence,
                self._applied_sequence,
            )
            return

        self._applied_sequence = sequence
        self._derived = raster
        self.imageChanged.emit(raster)
        self._set_state(target)

    @Slot(int, str)
    def _handle_render_failed(self, sequence: int, message: str) -> None:
        self._active_workers.pop(sequence, None)
        self._pending.pop(sequence, None)
        _LOGGER.warning("Render request %d failed: %s", sequence, message)
        self.renderFailed.emit(sequence, message)

    @Slot(str, object, int)
    def _handle_preset_preview(self, name: str, raster: Raster, generation: int) -> None:
        if generation != self._preview_generation:
            return
        self.presetPreviewReady.emit(name, raster)

    @Slot(int)
    def _handle_preview_finished(self, generation: int) -> None:
        self._active_preview_workers.pop(generation, None)


__all__ = ["Session", "SessionState"]
