"""Process scanners that turn the system process table into records."""

import logging
import os

import psutil

from pypstree.errors import RecordUnreadable, ScanUnavailable
from pypstree.log import TRACE_LEVEL_NUM
from pypstree.models import NAME_MAX_LEN, ProcessRecord

log = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = "/proc"

# psutil reports states as words; map them back to the kernel's letters.
# Keyed on the strings since not every STATUS_* constant exists everywhere.
PSUTIL_STATUS_CODES = {
    "running": "R",
    "sleeping": "S",
    "disk-sleep": "D",
    "stopped": "T",
    "tracing-stop": "t",
    "zombie": "Z",
    "dead": "X",
    "wake-kill": "K",
    "waking": "W",
    "parked": "P",
    "idle": "I",
    "locked": "L",
    "waiting": "W",
    "suspended": "T",
}


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdecimal()


def _parse_id(value: str, field: str, entry: str) -> int:
    if not _is_decimal(value):
        raise RecordUnreadable(entry, f"{field} is not a number: {value!r}")
    return int(value)


def parse_stat_line(line: str, entry: str = "<stat>") -> ProcessRecord:
    """
    Parse the leading fields of a per-process stat line.

    The kernel format is ``pid (name) state ppid ...``. The name may contain
    spaces and parentheses, so it runs from the first ``(`` to the last
    ``)``. Lines without parentheses are split on whitespace. Anything past
    the parent pid is ignored.

    Args:
        line: The raw stat text.
        entry: Label used in error messages (usually the file path).

    Raises:
        RecordUnreadable: If any of the four fields is missing or malformed.
    """
    open_paren = line.find("(")
    close_paren = line.rfind(")")
    if open_paren != -1 and close_paren > open_paren:
        head = line[:open_paren].split()
        name = line[open_paren + 1 : close_paren]
        tail = line[close_paren + 1 :].split()
        if len(head) != 1 or len(tail) < 2:
            raise RecordUnreadable(entry, "truncated stat line")
        pid_text, (state, ppid_text) = head[0], tail[:2]
    else:
        fields = line.split()
        if len(fields) < 4:
            raise RecordUnreadable(entry, "truncated stat line")
        pid_text, name, state, ppid_text = fields[:4]

    pid = _parse_id(pid_text, "pid", entry)
    ppid = _parse_id(ppid_text, "ppid", entry)
    if len(state) != 1:
        raise RecordUnreadable(entry, f"state is not a single character: {state!r}")
    if not name:
        raise RecordUnreadable(entry, "empty process name")

    return ProcessRecord(pid=pid, ppid=ppid, name=name[:NAME_MAX_LEN], status=state)


class ProcScanner:
    """
    Scanner that reads a procfs-style directory directly.

    Every numeric directory under the root is treated as a process and its
    ``stat`` file is parsed. Entries that vanish or cannot be parsed between
    the listing and the read are skipped.
    """

    name = "procfs"

    def __init__(self, proc_root: str = DEFAULT_PROC_ROOT) -> None:
        self._proc_root = proc_root

    @property
    def proc_root(self) -> str:
        """Get the directory being scanned."""
        return self._proc_root

    def scan(self) -> list[ProcessRecord]:
        """
        Scan the process root and return one record per readable process.

        Records come back in directory enumeration order.

        Raises:
            ScanUnavailable: If the root directory cannot be listed.
        """
        try:
            with os.scandir(self._proc_root) as entries:
                names = [entry.name for entry in entries]
        except OSError as e:
            raise ScanUnavailable(self._proc_root, e.strerror or str(e)) from e

        records: list[ProcessRecord] = []
        for name in names:
            if not _is_decimal(name):
                continue
            try:
                records.append(self.read_record(name))
            except (OSError, RecordUnreadable) as e:
                # The process probably exited after the listing was taken.
                log.debug(f"Skipping process entry {name}: {e}")
                continue

        log.debug(f"Scanned {len(records)} processes from {self._proc_root}")
        return records

    def read_record(self, entry: str) -> ProcessRecord:
        """Read and parse the stat file of one process directory."""
        path = os.path.join(self._proc_root, entry, "stat")
        log.log(TRACE_LEVEL_NUM, f"Reading {path}")
        with open(path, encoding="utf-8", errors="replace") as f:
            # comm may contain newlines, so read the whole file
            line = f.read()
        return parse_stat_line(line, entry=path)


class PsutilScanner:
    """Scanner built on psutil, for systems without a readable procfs."""

    name = "psutil"

    def scan(self) -> list[ProcessRecord]:
        """
        Collect one record per process visible to psutil.

        Handles NoSuchProcess, AccessDenied and ZombieProcess by skipping
        the affected process.

        Raises:
            ScanUnavailable: If psutil cannot enumerate processes at all.
        """
        records: list[ProcessRecord] = []
        try:
            for proc in psutil.process_iter(attrs=["pid", "ppid", "name", "status"]):
                try:
                    records.append(self._to_record(proc.info))
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
                    log.debug(f"Skipping PID {proc.pid}: {type(e).__name__}")
                    continue
                except RecordUnreadable as e:
                    log.debug(f"Skipping PID {proc.pid}: {e}")
                    continue
        except (OSError, psutil.Error) as e:
            raise ScanUnavailable("psutil", str(e)) from e

        log.debug(f"Scanned {len(records)} processes via psutil")
        return records

    @staticmethod
    def _to_record(info: dict) -> ProcessRecord:
        """Convert a psutil info dict, refusing attributes psutil could not read."""
        pid = info.get("pid")
        ppid = info.get("ppid")
        name = info.get("name")
        if pid is None or ppid is None or not name:
            raise RecordUnreadable(f"pid {pid}", "missing pid, ppid or name")
        status = PSUTIL_STATUS_CODES.get(info.get("status"), "?")
        return ProcessRecord(pid=pid, ppid=ppid, name=name[:NAME_MAX_LEN], status=status)


SCANNERS = {
    ProcScanner.name: ProcScanner,
    PsutilScanner.name: PsutilScanner,
}


def get_scanner(
    backend: str = ProcScanner.name, proc_root: str = DEFAULT_PROC_ROOT
) -> ProcScanner | PsutilScanner:
    """Return a scanner instance for the named backend."""
    if backend not in SCANNERS:
        raise ValueError(f"Unknown scanner backend {backend!r}; choose from {', '.join(SCANNERS)}")
    if backend == ProcScanner.name:
        return ProcScanner(proc_root)
    return SCANNERS[backend]()
