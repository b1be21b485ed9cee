"""Run R code through a located interpreter."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._discovery import locate
from ._errors import ExecutionError, NotFoundError
from ._process import LogCmd, SubprocessRunner

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from ._probe import EnvironmentProbe
    from ._process import ProcessRunner

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
SCRIPT_SUFFIX: Final[str] = ".R"


def execute(
    version: str | None,
    code: str,
    *,
    probe: EnvironmentProbe | None = None,
    runner: ProcessRunner | None = None,
    on_line: Callable[[str], None] | None = None,
) -> None:
    """
    Run *code* with R *version*, forwarding the merged output line by line.

    When *version* is ``None`` it is read from the lockfile in the current working directory.

    :raises NotFoundError: no interpreter reports *version*, raised before the script runs
    :raises ExecutionError: the interpreter could not be started or exited with a non-zero code
    """
    if version is None:
        from ._lockfile import execute_with_resolved_version  # noqa: PLC0415

        execute_with_resolved_version(Path.cwd(), code, probe=probe, runner=runner, on_line=on_line)
        return

    runner = SubprocessRunner() if runner is None else runner
    try:
        exe = locate(version, probe=probe, runner=runner)
    except NotFoundError as exc:
        raise exc.with_context("cannot execute R code") from exc

    with _script_file(code) as script:
        cmd = [exe, "--vanilla", str(script)]
        _LOGGER.info("run %s", LogCmd(cmd))
        try:
            exit_code = runner.stream(cmd, _forward(_write_stdout if on_line is None else on_line))
        except _ConsumerError as exc:
            raise exc.error from None
        except OSError as os_error:
            msg = f"failed to start {exe}: {os_error.strerror or os_error}"
            raise ExecutionError(msg) from os_error
    if exit_code != 0:
        msg = f"R script failed with exit code {exit_code}"
        raise ExecutionError(msg, returncode=exit_code)


@contextmanager
def _script_file(code: str) -> Generator[Path]:
    fd, tmp = tempfile.mkstemp(prefix="r-discovery-", suffix=SCRIPT_SUFFIX)
    try:
        with os.fdopen(fd, "wb") as script:
            script.write(code.encode("utf-8"))
        _LOGGER.debug("wrote script to %s", tmp)
        yield Path(tmp)
    finally:
        with suppress(FileNotFoundError):
            Path(tmp).unlink()


class _ConsumerError(Exception):
    """Carries an :class:`OSError` raised by the output consumer past the spawn failure handling."""

    def __init__(self, error: OSError) -> None:
        super().__init__(error)
        self.error = error


def _forward(on_line: Callable[[str], None]) -> Callable[[str], None]:
    def forward(line: str) -> None:
        try:
            on_line(line)
        except OSError as os_error:
            raise _ConsumerError(os_error) from os_error

    return forward


def _write_stdout(line: str) -> None:
    sys.stdout.write(line)
    sys.stdout.flush()


__all__ = [
    "SCRIPT_SUFFIX",
    "execute",
]
