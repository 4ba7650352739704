"""Errors raised by buffer primitives."""

from __future__ import annotations

from .state import Position


class BufferValidationError(RuntimeError):
    """Raised for inconsistent buffer data handed in by callers."""

    def __init__(self, message: str, *, cursor: Position | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


__all__ = ["BufferValidationError"]
