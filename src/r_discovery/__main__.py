"""Command line entry point: ``python -m r_discovery``."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser
from logging import basicConfig
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._discovery import locate
from ._errors import ExecutionError, RDiscoveryError
from ._executor import execute
from ._lockfile import execute_with_resolved_version

if TYPE_CHECKING:
    from collections.abc import Sequence

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="r-discovery", description="Locate R on Windows and run R code through it.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log discovery details")
    sub = parser.add_subparsers(dest="command", required=True)

    locate_parser = sub.add_parser("locate", help="print the path of the Rscript matching a version")
    locate_parser.add_argument("version", help="R version, e.g. 4.5.0")

    run_parser = sub.add_parser("run", help="run an R script")
    run_parser.add_argument("-V", "--r-version", dest="version", help="R version, default: read from renv.lock")
    run_parser.add_argument("-C", "--directory", type=Path, default=None, help="directory holding renv.lock")
    run_parser.add_argument("file", nargs="?", default="-", help="script to run, - for stdin (default)")
    return parser


def _read_code(file: str) -> str:
    if file == "-":
        return sys.stdin.read()
    return Path(file).read_text(encoding="utf-8")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        if args.command == "locate":
            sys.stdout.write(f"{locate(args.version)}\n")
        else:
            code = _read_code(args.file)
            if args.version is None:
                execute_with_resolved_version(args.directory, code)
            else:
                execute(args.version, code)
    except ExecutionError as exc:
        sys.stderr.write(f"{exc}\n")
        # negative return codes are signal numbers on POSIX
        return exc.returncode if exc.returncode is not None and exc.returncode > 0 else 1
    except (RDiscoveryError, OSError, ValueError) as exc:
        _LOGGER.debug("command %s failed", args.command, exc_info=True)
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
