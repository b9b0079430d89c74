"""pypstree - print running processes as a tree."""

import logging
import os
import sys

from pypstree.config import Settings
from pypstree.errors import CorruptTree, ScanUnavailable
from pypstree.log import setup_logging
from pypstree.render import print_forest
from pypstree.scanner import get_scanner
from pypstree.tree import build_forest

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SCAN_UNAVAILABLE = 1
EXIT_BAD_CONFIG = 2
EXIT_CORRUPT_TREE = 3


def run(settings: Settings) -> int:
    """Scan, build and print once; return the process exit status."""
    scanner = get_scanner(settings.backend, settings.proc_root)
    try:
        records = scanner.scan()
    except ScanUnavailable as e:
        log.debug("Scan failed", exc_info=True)
        print(f"pypstree: {e}", file=sys.stderr)
        return EXIT_SCAN_UNAVAILABLE

    forest = build_forest(records)
    try:
        print_forest(forest, sys.stdout, unit=settings.indent_unit)
    except CorruptTree as e:
        print(f"pypstree: {e}", file=sys.stderr)
        return EXIT_CORRUPT_TREE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for pypstree.

    Command-line arguments are accepted but not interpreted; configuration
    comes from ``PYPSTREE_*`` environment variables.
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"pypstree: invalid configuration: {e}", file=sys.stderr)
        return EXIT_BAD_CONFIG

    setup_logging(settings.log_level)
    if argv:
        log.debug(f"Ignoring command-line arguments: {argv}")

    try:
        return run(settings)
    except BrokenPipeError:
        # Reader went away (e.g. piped into head); silence the flush at exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
