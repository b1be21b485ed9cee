"""Access to the ambient environment discovery depends on."""

from __future__ import annotations

import logging
import os
import string
import sys
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from platformdirs import user_data_path

if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
IS_WIN: Final[bool] = sys.platform == "win32"


@runtime_checkable
class EnvironmentProbe(Protocol):
    """Read-only view of the search path, environment variables, registry and drives."""

    def path_entries(self) -> list[str]: ...

    def getenv(self, name: str) -> str | None: ...

    def registry_value(self, hive: str, key: str, name: str) -> object | None: ...

    def local_app_data(self) -> str | None: ...

    def drives(self) -> list[str]: ...

    def is_file(self, path: str) -> bool: ...


class SystemProbe(EnvironmentProbe):
    """Probe backed by the process environment, the Windows registry and the file system."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self.env = os.environ if env is None else env

    def path_entries(self) -> list[str]:
        path = self.env.get("PATH")
        if not path:
            return []
        return [entry for entry in path.split(os.pathsep) if entry]

    def getenv(self, name: str) -> str | None:
        return self.env.get(name) or None

    def registry_value(self, hive: str, key: str, name: str) -> object | None:  # noqa: PLR6301
        if not IS_WIN:  # pragma: win32 no cover
            return None
        from ._windows import read_value  # noqa: PLC0415

        return read_value(hive, key, name)

    def local_app_data(self) -> str | None:
        if local := self.getenv("LOCALAPPDATA"):
            return local
        if not IS_WIN:  # pragma: win32 no cover
            return None
        return str(user_data_path(appauthor=False, roaming=False))

    def drives(self) -> list[str]:  # noqa: PLR6301
        if not IS_WIN:  # pragma: win32 no cover
            return []
        found = [f"{letter}:\\" for letter in string.ascii_uppercase if os.path.isdir(f"{letter}:\\")]
        _LOGGER.debug("local drives %s", found)
        return found

    def is_file(self, path: str) -> bool:  # noqa: PLR6301
        return os.path.isfile(path)


__all__ = [
    "IS_WIN",
    "EnvironmentProbe",
    "SystemProbe",
]
