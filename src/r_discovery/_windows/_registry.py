"""Read R installation records the R for Windows installer writes to the registry - Windows only."""

from __future__ import annotations

import logging
import sys
import winreg
from logging import basicConfig, getLogger
from typing import TYPE_CHECKING, Any, Final

from r_discovery._discovery import REGISTRY_KEYS

if TYPE_CHECKING:
    from collections.abc import Generator

    _RegistryInstall = tuple[str, str, str]

_LOGGER: Final[logging.Logger] = getLogger(__name__)
_HIVES: Final[dict[str, int]] = {
    "HKEY_CURRENT_USER": winreg.HKEY_CURRENT_USER,  # ty: ignore[unresolved-attribute]
    "HKEY_LOCAL_MACHINE": winreg.HKEY_LOCAL_MACHINE,  # ty: ignore[unresolved-attribute]
}


def _access() -> int:
    return winreg.KEY_READ | winreg.KEY_WOW64_64KEY  # ty: ignore[unresolved-attribute]


def enum_keys(key: Any) -> Generator[str, None, None]:  # noqa: ANN401
    at = 0
    while True:
        try:
            yield winreg.EnumKey(key, at)  # ty: ignore[unresolved-attribute]
        except OSError:
            break
        at += 1


def get_value(key: Any, value_name: str | None) -> Any:  # noqa: ANN401
    try:
        return winreg.QueryValueEx(key, value_name)[0]  # ty: ignore[unresolved-attribute]
    except OSError:
        return None


def read_value(hive_name: str, key: str, value_name: str) -> Any:  # noqa: ANN401
    """Read *value_name* from ``hive_name\\key`` in the 64-bit registry view, ``None`` when absent."""
    try:
        with winreg.OpenKeyEx(_HIVES[hive_name], key, 0, _access()) as handle:  # ty: ignore[unresolved-attribute]
            value = get_value(handle, value_name)
    except OSError:
        _LOGGER.debug("registry key %s\\%s missing", hive_name, key)
        return None
    _LOGGER.debug("registry %s\\%s %s=%r", hive_name, key, value_name, value)
    return value


def discover_installs() -> Generator[_RegistryInstall, None, None]:
    for hive_name, vendor_key in REGISTRY_KEYS:
        try:
            with winreg.OpenKeyEx(_HIVES[hive_name], vendor_key, 0, _access()) as root_key:  # ty: ignore[unresolved-attribute]
                versions = list(enum_keys(root_key))
        except OSError:
            continue
        for version in versions:
            install_path = read_value(hive_name, rf"{vendor_key}\{version}", "InstallPath")
            if isinstance(install_path, str) and install_path:
                yield hive_name, version, install_path
            else:
                msg(f"{hive_name}/{vendor_key}/{version}", f"bad InstallPath {install_path!r}")


def msg(path: str, what: object) -> None:
    _LOGGER.warning("unusable R install record in Windows Registry at %s error: %s", path, what)


def _run() -> None:
    basicConfig()
    installs = [repr(install) for install in discover_installs()]
    sys.stdout.write("\n".join(sorted(installs)))
    sys.stdout.write("\n")


if __name__ == "__main__":
    _run()
