"""Error types raised while locating and running R."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from typing_extensions import Self


class RDiscoveryError(Exception):
    """Base class of every error raised by this package."""

    def with_context(self, context: str) -> Self:
        """Return a copy of this error, same type and attributes, with *context* prepended to the message."""
        clone = copy.copy(self)
        clone.args = (f"{context}: {self}",)
        return clone


class NotFoundError(RDiscoveryError):
    """No R interpreter matching the requested version was found."""


class ExecutionError(RDiscoveryError):
    """The interpreter was located but running the script failed."""

    def __init__(self, msg: str, returncode: int | None = None) -> None:
        super().__init__(msg)
        self.returncode = returncode


class ManifestError(RDiscoveryError):
    """The lockfile is missing or does not hold an R version."""

    def __init__(self, msg: str, path: Path | None = None) -> None:
        super().__init__(msg)
        self.path = path


__all__ = [
    "ExecutionError",
    "ManifestError",
    "NotFoundError",
    "RDiscoveryError",
]
