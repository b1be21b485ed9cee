from __future__ import annotations

import sys
from types import ModuleType, TracebackType
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from typing_extensions import Self

_HIVE_NAMES = {0x80000001: "HKEY_CURRENT_USER", 0x80000002: "HKEY_LOCAL_MACHINE"}


class _Key:
    def __init__(self, hive: str, path: str) -> None:
        self.hive = hive
        self.path = path

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        return None


class FakeRegistry:
    """In-memory registry: ``values`` maps ``(hive name, key path)`` to that key's named values."""

    def __init__(self) -> None:
        self.values: dict[tuple[str, str], dict[str, object]] = {}
        self.access: list[int] = []

    def add(self, hive: str, key: str, **values: object) -> None:
        self.values.setdefault((hive, key), {}).update(values)

    def _exists(self, hive: str, key: str) -> bool:
        prefix = f"{key}\\"
        return any(h == hive and (k == key or k.startswith(prefix)) for h, k in self.values)

    def _children(self, key: _Key) -> list[str]:
        prefix = f"{key.path}\\"
        children: list[str] = []
        for hive, path in self.values:
            if hive == key.hive and path.startswith(prefix):
                child = path[len(prefix) :].split("\\")[0]
                if child not in children:
                    children.append(child)
        return children

    def open_key_ex(self, hive: int, key: str, reserved: int = 0, access: int = 0x20019) -> _Key:  # noqa: ARG002
        self.access.append(access)
        hive_name = _HIVE_NAMES[hive]
        if not self._exists(hive_name, key):
            raise FileNotFoundError(2, "The system cannot find the file specified")
        return _Key(hive_name, key)

    def enum_key(self, key: _Key, index: int) -> str:
        children = self._children(key)
        if index >= len(children):
            raise OSError(259, "No more data is available")
        return children[index]

    def query_value_ex(self, key: _Key, name: str) -> tuple[object, int]:
        values = self.values.get((key.hive, key.path), {})
        if name not in values:
            raise FileNotFoundError(2, "The system cannot find the file specified")
        return values[name], 1


def _create_winreg_mock(registry: FakeRegistry) -> ModuleType:
    """Create a winreg module backed by *registry* that works on all platforms."""
    winreg = ModuleType("winreg")
    winreg.HKEY_CURRENT_USER = 0x80000001  # ty: ignore[unresolved-attribute]
    winreg.HKEY_LOCAL_MACHINE = 0x80000002  # ty: ignore[unresolved-attribute]
    winreg.KEY_READ = 0x20019  # ty: ignore[unresolved-attribute]
    winreg.KEY_WOW64_64KEY = 0x0100  # ty: ignore[unresolved-attribute]
    winreg.KEY_WOW64_32KEY = 0x0200  # ty: ignore[unresolved-attribute]
    winreg.OpenKeyEx = registry.open_key_ex  # ty: ignore[unresolved-attribute]
    winreg.EnumKey = registry.enum_key  # ty: ignore[unresolved-attribute]
    winreg.QueryValueEx = registry.query_value_ex  # ty: ignore[unresolved-attribute]
    return winreg


@pytest.fixture
def registry(monkeypatch: pytest.MonkeyPatch) -> FakeRegistry:
    fake = FakeRegistry()
    monkeypatch.setitem(sys.modules, "winreg", _create_winreg_mock(fake))
    for name in ("r_discovery._windows", "r_discovery._windows._registry"):
        monkeypatch.delitem(sys.modules, name, raising=False)
    return fake


@pytest.fixture
def populated(registry: FakeRegistry) -> FakeRegistry:
    registry.add("HKEY_CURRENT_USER", r"Software\R-core\R\4.4.1", InstallPath="C:\\Users\\user\\R\\R-4.4.1")
    registry.values["HKEY_LOCAL_MACHINE", r"Software\R-core\R"] = {
        "Current Version": "4.5.0",
        "InstallPath": "C:\\Program Files\\R\\R-4.5.0",
    }
    registry.add("HKEY_LOCAL_MACHINE", r"Software\R-core\R\4.5.0", InstallPath="C:\\Program Files\\R\\R-4.5.0")
    registry.add("HKEY_LOCAL_MACHINE", r"Software\R-core\R64\4.5.0", InstallPath="C:\\Program Files\\R\\R-4.5.0")
    registry.add("HKEY_LOCAL_MACHINE", r"Software\R-core\R64\3.6.3", InstallPath=363)
    registry.add("HKEY_LOCAL_MACHINE", r"Software\R-core\R64\4.0.0")
    return registry
