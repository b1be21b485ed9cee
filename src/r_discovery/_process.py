"""Subprocess invocation with captured or streamed output."""

from __future__ import annotations

import logging
import os
import subprocess  # noqa: S404
from shlex import quote
from subprocess import Popen  # noqa: S404
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs a command with stderr merged into stdout."""

    def capture(self, cmd: Sequence[str]) -> tuple[int, str]:
        """Run *cmd* to completion and return its exit code and output."""
        ...

    def stream(self, cmd: Sequence[str], on_line: Callable[[str], None]) -> int:
        """Run *cmd*, hand every output line to *on_line* as it arrives and return the exit code."""
        ...


class SubprocessRunner(ProcessRunner):
    """Runs commands through :class:`subprocess.Popen`. Spawn failures raise :class:`OSError`."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self.env = os.environ if env is None else env

    def _popen(self, cmd: Sequence[str]) -> Popen[str]:
        return Popen(  # noqa: S603
            list(cmd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=dict(self.env),
            encoding="utf-8",
            errors="backslashreplace",
        )

    def capture(self, cmd: Sequence[str]) -> tuple[int, str]:
        _LOGGER.debug("capture output of %s", LogCmd(list(cmd)))
        with self._popen(cmd) as process:
            out, _ = process.communicate()
        return process.returncode, out

    def stream(self, cmd: Sequence[str], on_line: Callable[[str], None]) -> int:
        _LOGGER.debug("stream output of %s", LogCmd(list(cmd)))
        with self._popen(cmd) as process:
            assert process.stdout is not None  # noqa: S101
            for line in process.stdout:
                on_line(line)
            return process.wait()


class LogCmd:
    def __init__(self, cmd: list[str]) -> None:
        self.cmd = cmd

    def __repr__(self) -> str:
        return " ".join(quote(str(c)) for c in self.cmd)


__all__ = [
    "LogCmd",
    "ProcessRunner",
    "SubprocessRunner",
]
