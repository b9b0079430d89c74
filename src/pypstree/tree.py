"""Forest construction: links scanned process records to their parents."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pypstree.models import ProcessRecord

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ProcessForest:
    """
    Immutable parent/child forest over an arena of process records.

    Records are addressed by their insertion index. ``parents[i]`` is the
    index of record ``i``'s parent (or None) and ``children[i]`` lists its
    children in the order they were attached. ``roots`` holds every
    parentless record in insertion order.
    """

    records: tuple[ProcessRecord, ...] = ()
    parents: tuple[int | None, ...] = ()
    children: tuple[tuple[int, ...], ...] = ()
    roots: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def canonical_root(self) -> int | None:
        """Index of the first root reporting parent pid 0, if any."""
        for index in self.roots:
            if self.records[index].is_primordial:
                return index
        return None


class ForestBuilder:
    """
    Incrementally builds a ProcessForest from records in scan order.

    A record is attached to a parent only if a record with its parent pid
    was added earlier; otherwise it becomes a root. Parent lookup goes
    through a pid index, so each insertion is O(1).
    """

    def __init__(self) -> None:
        self._records: list[ProcessRecord] = []
        self._parents: list[int | None] = []
        self._children: list[list[int]] = []
        self._roots: list[int] = []
        self._index_by_pid: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: ProcessRecord) -> int:
        """Insert a record, link it to an already-seen parent, return its index."""
        index = len(self._records)
        self._records.append(record)
        self._children.append([])

        parent = None
        if not record.is_primordial:
            parent = self._index_by_pid.get(record.ppid)

        self._parents.append(parent)
        if parent is None:
            if not record.is_primordial:
                log.debug(f"PID {record.pid} has no earlier parent {record.ppid}; keeping it as a root")
            self._roots.append(index)
        else:
            self._children[parent].append(index)

        if record.pid in self._index_by_pid:
            log.warning(f"Duplicate PID {record.pid} in snapshot; later lookups use the newest record")
        self._index_by_pid[record.pid] = index
        return index

    def extend(self, records: Iterable[ProcessRecord]) -> None:
        """Add each record in order."""
        for record in records:
            self.add(record)

    def build(self) -> ProcessForest:
        """Freeze the current state into an immutable ProcessForest."""
        return ProcessForest(
            records=tuple(self._records),
            parents=tuple(self._parents),
            children=tuple(tuple(kids) for kids in self._children),
            roots=tuple(self._roots),
        )


def build_forest(records: Iterable[ProcessRecord]) -> ProcessForest:
    """Build a forest from records given in scan order."""
    builder = ForestBuilder()
    builder.extend(records)
    forest = builder.build()
    log.debug(f"Built forest of {len(forest)} processes with {len(forest.roots)} roots")
    return forest
