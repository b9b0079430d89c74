"""Exceptions raised while scanning and printing the process tree."""


class PstreeError(Exception):
    """Base class for pypstree errors."""


class ScanUnavailable(PstreeError):
    """The process listing itself could not be read."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"cannot list processes in {source}: {reason}")
        self.source = source
        self.reason = reason


class RecordUnreadable(PstreeError):
    """A single process entry could not be read or parsed."""

    def __init__(self, entry: str, reason: str) -> None:
        super().__init__(f"{entry}: {reason}")
        self.entry = entry
        self.reason = reason


class CorruptTree(PstreeError):
    """The forest contains a cycle or a reference outside the arena."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("corrupt process tree: " + "; ".join(problems))
        self.problems = problems
