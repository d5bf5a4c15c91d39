"""Exception hierarchy shared by the PhotoEdit core."""

from __future__ import annotations


class PhotoEditError(Exception):
    """Base class for errors surfaced to PhotoEdit callers."""


class DecodeError(PhotoEditError):
    """Raised when encoded image bytes cannot be turned into a raster."""


class UnknownParameterError(PhotoEditError, KeyError):
    """Raised when an adjustment name is not part of the fixed schema."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown adjustment parameter: {self.name!r}"


__all__ = ["DecodeError", "PhotoEditError", "UnknownParameterError"]
