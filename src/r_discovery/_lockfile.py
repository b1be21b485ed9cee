"""Read the required R version from an renv lockfile."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._errors import ManifestError, RDiscoveryError
from ._executor import execute

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._probe import EnvironmentProbe
    from ._process import ProcessRunner

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
LOCKFILE_NAME: Final[str] = "renv.lock"


def resolve_version(
    directory: str | os.PathLike[str] | None = None,
    *,
    lockfile: str = LOCKFILE_NAME,
    search_parents: bool = False,
) -> str:
    """
    Return the ``R.Version`` field of the lockfile in *directory* (default: the current working directory).

    :param search_parents: also look for the lockfile in every parent of *directory*
    :raises ManifestError: the lockfile is missing or holds no usable version
    """
    start = Path.cwd() if directory is None else Path(directory)
    expected = start / lockfile
    path = _find_lockfile(start, lockfile, search_parents=search_parents)
    if path is None:
        msg = f"lockfile {expected} not found"
        raise ManifestError(msg, path=expected)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        version = data["R"]["Version"]
    except (OSError, ValueError, KeyError, TypeError) as exc:
        msg = f"cannot read R version from {path}: {_describe(exc)}"
        raise ManifestError(msg, path=path) from exc
    if not isinstance(version, str) or not version:
        msg = f"cannot read R version from {path}: R.Version is not a non-empty string: {version!r}"
        raise ManifestError(msg, path=path)
    _LOGGER.debug("lockfile %s requires R %s", path, version)
    return version


def _find_lockfile(start: Path, lockfile: str, *, search_parents: bool) -> Path | None:
    current = start
    while True:
        candidate = current / lockfile
        if candidate.is_file():
            return candidate
        if not search_parents:
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _describe(exc: Exception) -> str:
    if isinstance(exc, KeyError):
        return f"missing field {exc.args[0]!r}"
    if isinstance(exc, TypeError):
        return f"unexpected document shape ({exc})"
    return str(exc)


def execute_with_resolved_version(  # noqa: PLR0913
    directory: str | os.PathLike[str] | None,
    code: str,
    *,
    lockfile: str = LOCKFILE_NAME,
    search_parents: bool = False,
    probe: EnvironmentProbe | None = None,
    runner: ProcessRunner | None = None,
    on_line: Callable[[str], None] | None = None,
) -> None:
    """Run *code* with the R version named by the lockfile in *directory*, see :func:`execute`."""
    try:
        version = resolve_version(directory, lockfile=lockfile, search_parents=search_parents)
        execute(version, code, probe=probe, runner=runner, on_line=on_line)
    except RDiscoveryError as exc:
        where = Path.cwd() if directory is None else Path(directory)
        raise exc.with_context(f"executing R code with the version from {where / lockfile} failed") from exc


__all__ = [
    "LOCKFILE_NAME",
    "execute_with_resolved_version",
    "resolve_version",
]
