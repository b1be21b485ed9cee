"""Windows-specific R discovery via the R-core registry entries."""

from __future__ import annotations

from ._registry import _run, discover_installs, read_value

__all__ = [
    "_run",
    "discover_installs",
    "read_value",
]
