"""Errors raised while encoding or decoding NBT data."""

from __future__ import annotations


class NbtError(ValueError):
    """Raised when NBT data cannot be encoded or decoded.

    Errors caused by a failing stream are raised from the original
    ``OSError`` so that it stays available as ``__cause__``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message