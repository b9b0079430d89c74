"""Data models for pypstree."""

from dataclasses import dataclass

# Longest name kept for a process; the kernel itself caps comm at 15 bytes.
NAME_MAX_LEN = 63


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable record of one observed process."""

    pid: int
    ppid: int  # 0 means no parent
    name: str
    status: str  # 'R', 'S', 'Z', 'D', etc.

    @property
    def is_primordial(self) -> bool:
        """True for a process that reports no parent at all."""
        return self.ppid == 0
