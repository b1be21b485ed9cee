"""Locate a specific R installation on Windows and run R code through it."""

from __future__ import annotations

from importlib.metadata import version

from ._discovery import locate, propose_candidates
from ._errors import ExecutionError, ManifestError, NotFoundError, RDiscoveryError
from ._executor import execute
from ._lockfile import LOCKFILE_NAME, execute_with_resolved_version, resolve_version
from ._probe import EnvironmentProbe, SystemProbe
from ._process import ProcessRunner, SubprocessRunner

__version__ = version("r-discovery")

__all__ = [
    "LOCKFILE_NAME",
    "EnvironmentProbe",
    "ExecutionError",
    "ManifestError",
    "NotFoundError",
    "ProcessRunner",
    "RDiscoveryError",
    "SubprocessRunner",
    "SystemProbe",
    "__version__",
    "execute",
    "execute_with_resolved_version",
    "locate",
    "propose_candidates",
    "resolve_version",
]
