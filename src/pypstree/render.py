"""Text rendering of a process forest, one indented line per process."""

import logging
import sys
from collections.abc import Iterator
from typing import TextIO

from pypstree.errors import CorruptTree
from pypstree.models import ProcessRecord
from pypstree.tree import ProcessForest

log = logging.getLogger(__name__)

DEFAULT_INDENT_UNIT = " "


def indent(depth: int, unit: str = DEFAULT_INDENT_UNIT) -> str:
    """Return the indentation prefix for a node at ``depth``."""
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    return unit * depth


def format_line(record: ProcessRecord, depth: int, unit: str = DEFAULT_INDENT_UNIT) -> str:
    """Format one tree line, e.g. ``  |- cat[3] R``."""
    return f"{indent(depth, unit)}|- {record.name}[{record.pid}] {record.status}"


def _walk(
    forest: ProcessForest,
    root: int,
    unit: str,
    visited: set[int],
) -> Iterator[str]:
    """
    Yield the lines of one root's subtree in pre-order.

    Uses an explicit stack so depth is not limited by the interpreter's
    recursion limit. ``visited`` is shared across roots; meeting a node a
    second time means the forest has a cycle or a node with two parents.

    Raises:
        CorruptTree: On a revisited node or an index outside the arena.
    """
    stack = [(root, 0)]
    while stack:
        index, depth = stack.pop()
        if not 0 <= index < len(forest.records):
            raise CorruptTree([f"dangling reference to index {index}"])
        record = forest.records[index]
        if index in visited:
            raise CorruptTree([f"PID {record.pid} reached twice"])
        visited.add(index)

        yield format_line(record, depth, unit)

        # Reversed so the first child is popped first.
        for child in reversed(forest.children[index]):
            stack.append((child, depth + 1))


def iter_lines(forest: ProcessForest, unit: str = DEFAULT_INDENT_UNIT) -> Iterator[str]:
    """
    Yield every line of the forest, roots in builder order.

    Raises:
        CorruptTree: As soon as a cycle or dangling reference is met.
    """
    visited: set[int] = set()
    for root in forest.roots:
        yield from _walk(forest, root, unit, visited)


def print_forest(
    forest: ProcessForest,
    stream: TextIO | None = None,
    unit: str = DEFAULT_INDENT_UNIT,
) -> int:
    """
    Write the forest to ``stream`` (stdout by default).

    A corrupt subtree is abandoned where the problem is found and the
    remaining roots are still printed.

    Returns:
        Number of lines written.

    Raises:
        CorruptTree: After printing, if any subtree was abandoned.
    """
    if stream is None:
        stream = sys.stdout

    written = 0
    problems: list[str] = []
    visited: set[int] = set()
    for root in forest.roots:
        try:
            for line in _walk(forest, root, unit, visited):
                stream.write(line + "\n")
                written += 1
        except CorruptTree as e:
            log.error(f"Abandoning subtree of root index {root}: {e}")
            problems.extend(e.problems)

    stream.flush()
    if problems:
        raise CorruptTree(problems)
    return written
