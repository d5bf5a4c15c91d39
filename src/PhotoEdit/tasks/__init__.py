"""Background worker helpers for render tasks."""

from .preset_preview_worker import PresetPreviewSignals, PresetPreviewWorker
from .render_worker import RenderSignals, RenderWorker

__all__ = [
    "PresetPreviewSignals",
    "PresetPreviewWorker",
    "RenderSignals",
    "RenderWorker",
]
