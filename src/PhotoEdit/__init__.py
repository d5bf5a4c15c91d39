"""PhotoEdit: parametric colour/tone editing for a single photograph."""

from __future__ import annotations

from .utils.logging import get_logger

__all__ = ["__version__", "get_logger"]

__version__ = "0.1.0"

get_logger()
