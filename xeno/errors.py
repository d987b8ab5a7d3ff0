from __future__ import annotations


class XenoError(Exception):
    """Base class for every failure surfaced by the Xeno front-end and interpreter."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
