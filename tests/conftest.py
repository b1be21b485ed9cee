from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class FakeProbe:
    """Simulated search space: nothing exists unless a test puts it there."""

    def __init__(self) -> None:
        self.path: list[str] = []
        self.env: dict[str, str] = {}
        self.registry: dict[tuple[str, str, str], object] = {}
        self.app_data: str | None = None
        self.local_drives: list[str] = []
        self.files: set[str] = set()

    def path_entries(self) -> list[str]:
        return list(self.path)

    def getenv(self, name: str) -> str | None:
        return self.env.get(name)

    def registry_value(self, hive: str, key: str, name: str) -> object | None:
        return self.registry.get((hive, key, name))

    def local_app_data(self) -> str | None:
        return self.app_data

    def drives(self) -> list[str]:
        return list(self.local_drives)

    def is_file(self, path: str) -> bool:
        return path in self.files


class StubRunner:
    """Stub interpreters: ``versions`` maps an executable to its ``--version`` output."""

    def __init__(self) -> None:
        self.versions: dict[str, str | OSError] = {}
        self.output: list[str] = []
        self.exit_code = 0
        self.spawn_error: OSError | None = None
        self.calls: list[list[str]] = []
        self.scripts: list[bytes] = []

    def install(self, exe: str, reported: str | OSError, probe: FakeProbe) -> None:
        self.versions[exe] = reported
        probe.files.add(exe)

    def capture(self, cmd: Sequence[str]) -> tuple[int, str]:
        self.calls.append(list(cmd))
        reported = self.versions[cmd[0]]
        if isinstance(reported, OSError):
            raise reported
        return 0, reported

    def stream(self, cmd: Sequence[str], on_line: Callable[[str], None]) -> int:
        self.calls.append(list(cmd))
        if self.spawn_error is not None:
            raise self.spawn_error
        self.scripts.append(Path(cmd[-1]).read_bytes())
        for line in self.output:
            on_line(line)
        return self.exit_code


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def runner() -> StubRunner:
    return StubRunner()


@pytest.fixture
def script_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect temporary script files into an empty directory the test can inspect."""
    import tempfile  # noqa: PLC0415

    folder = tmp_path / "tmp"
    folder.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(folder))
    return folder
