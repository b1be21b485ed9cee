from __future__ import annotations

import logging
import ntpath
from typing import TYPE_CHECKING, Final

from ._errors import NotFoundError
from ._probe import SystemProbe
from ._process import LogCmd, SubprocessRunner

if TYPE_CHECKING:
    from collections.abc import Generator

    from ._probe import EnvironmentProbe
    from ._process import ProcessRunner

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

RSCRIPT: Final[str] = "Rscript.exe"
BIN_DIR: Final[tuple[str, str]] = ("bin", "x64")
REGISTRY_KEYS: Final[tuple[tuple[str, str], ...]] = (
    ("HKEY_CURRENT_USER", r"Software\R-core\R"),
    ("HKEY_CURRENT_USER", r"Software\R-core\R64"),
    ("HKEY_LOCAL_MACHINE", r"Software\R-core\R"),
    ("HKEY_LOCAL_MACHINE", r"Software\R-core\R64"),
)
_DEFAULT_PROGRAM_FILES: Final[str] = "C:\\Program Files"
_DRIVE_ROOTS: Final[tuple[str, ...]] = ("Program Files", "")


def locate(
    version: str,
    *,
    probe: EnvironmentProbe | None = None,
    runner: ProcessRunner | None = None,
) -> str:
    """
    Find the 64-bit ``Rscript.exe`` that reports *version*.

    Candidate directories are tried in precedence order (``PATH``, ``R_HOME``, registry, install directories, drive
    scan) and the first executable whose ``--version`` output contains *version* wins.

    :raises NotFoundError: when no candidate verifies
    """
    if not version:
        msg = "version must not be empty"
        raise ValueError(msg)
    probe = SystemProbe() if probe is None else probe
    runner = SubprocessRunner() if runner is None else runner
    _LOGGER.info("find R %s", version)
    candidates = propose_candidates(version, probe)
    for pos, directory in enumerate(candidates):
        exe = ntpath.join(directory, RSCRIPT)
        if not probe.is_file(exe):
            _LOGGER.debug("candidate[%d]=%s has no %s", pos, directory, RSCRIPT)
            continue
        if _reports_version(exe, version, runner):
            _LOGGER.info("located R %s at %s", version, exe)
            return exe
    msg = (
        f"R {version} (64-bit) not found, searched the PATH and R_HOME environment variables, "
        f"the Windows registry and {len(candidates)} candidate directories"
    )
    raise NotFoundError(msg)


def _reports_version(exe: str, version: str, runner: ProcessRunner) -> bool:
    cmd = [exe, "--version"]
    try:
        code, out = runner.capture(cmd)
    except OSError as os_error:
        _LOGGER.debug("failed to query %s: %s", LogCmd(cmd), os_error)
        return False
    # substring, so 4.5.0 also accepts a build reporting 4.5.0-patch1
    if version in out:
        _LOGGER.debug("accepted %s (exit code %d)", exe, code)
        return True
    _LOGGER.debug("rejected %s, reported %r", exe, out.strip())
    return False


def propose_candidates(version: str, probe: EnvironmentProbe) -> list[str]:
    """Return the candidate ``bin\\x64`` directories for *version*, deduplicated in precedence order."""
    seen: set[str] = set()
    candidates: list[str] = []
    for directory in _propose(version, probe):
        key = ntpath.normcase(ntpath.normpath(directory))
        if key in seen:
            continue
        seen.add(key)
        _LOGGER.debug("candidate[%d]=%s", len(candidates), directory)
        candidates.append(directory)
    return candidates


def _propose(version: str, probe: EnvironmentProbe) -> Generator[str, None, None]:
    yield from _propose_from_path(probe)
    yield from _propose_from_r_home(probe)
    yield from _propose_from_registry(version, probe)
    yield from _propose_from_install_roots(version, probe)
    yield from _propose_from_drives(version, probe)


def _bin_dir(root: str) -> str:
    return ntpath.join(root, *BIN_DIR)


def _install_dir(root: str, version: str) -> str:
    return _bin_dir(ntpath.join(root, "R", f"R-{version}"))


def _propose_from_path(probe: EnvironmentProbe) -> Generator[str, None, None]:
    suffix = ntpath.join(*BIN_DIR).lower()
    for entry in probe.path_entries():
        if "R" in entry and ntpath.normpath(entry).rstrip("\\/").lower().endswith(suffix):
            yield entry


def _propose_from_r_home(probe: EnvironmentProbe) -> Generator[str, None, None]:
    if r_home := probe.getenv("R_HOME"):
        yield _bin_dir(r_home)


def _propose_from_registry(version: str, probe: EnvironmentProbe) -> Generator[str, None, None]:
    for hive, vendor_key in REGISTRY_KEYS:
        install_path = probe.registry_value(hive, rf"{vendor_key}\{version}", "InstallPath")
        if isinstance(install_path, str) and install_path:
            yield _bin_dir(install_path)


def _propose_from_install_roots(version: str, probe: EnvironmentProbe) -> Generator[str, None, None]:
    for name in ("ProgramFiles", "ProgramW6432"):
        if program_files := probe.getenv(name):
            yield _install_dir(program_files, version)
    yield _install_dir(_DEFAULT_PROGRAM_FILES, version)
    if local_app_data := probe.local_app_data():
        yield _install_dir(ntpath.join(local_app_data, "Programs"), version)


def _propose_from_drives(version: str, probe: EnvironmentProbe) -> Generator[str, None, None]:
    for drive in probe.drives():
        for root in _DRIVE_ROOTS:
            yield _install_dir(ntpath.join(drive, root) if root else drive, version)


__all__ = [
    "REGISTRY_KEYS",
    "RSCRIPT",
    "locate",
    "propose_candidates",
]
