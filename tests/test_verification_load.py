"""Verification Test: Load - large and deep process tables.

Growable storage for both the top-level records and a single node's child
list must take at least 10,000 insertions without losing anything, and
rendering must not be limited by depth.
"""

import io
import time

import pytest

from pypstree.models import ProcessRecord
from pypstree.render import iter_lines, print_forest
from pypstree.tree import ForestBuilder, build_forest

INSERTIONS = 10_000


class TestLoad:
    """Load verification suite tests."""

    def test_many_top_level_records(self):
        """Test 10,000 parentless records all survive as roots."""
        records = [ProcessRecord(pid=pid, ppid=0, name=f"p{pid}", status="S") for pid in range(1, INSERTIONS + 1)]
        forest = build_forest(records)

        assert len(forest) == INSERTIONS
        assert len(forest.roots) == INSERTIONS
        assert list(forest.records) == records

    def test_many_children_of_one_node(self):
        """Test 10,000 children attach to one parent in insertion order."""
        builder = ForestBuilder()
        builder.add(ProcessRecord(pid=1, ppid=0, name="init", status="S"))
        for pid in range(2, INSERTIONS + 2):
            builder.add(ProcessRecord(pid=pid, ppid=1, name=f"w{pid}", status="S"))
        forest = builder.build()

        assert forest.roots == (0,)
        assert forest.children[0] == tuple(range(1, INSERTIONS + 1))
        assert all(forest.parents[i] == 0 for i in range(1, INSERTIONS + 1))

    def test_deep_chain_renders_every_level(self):
        """Test a chain deeper than the interpreter's recursion limit."""
        depth = 5_000
        records = [ProcessRecord(pid=1, ppid=0, name="n", status="S")]
        records += [ProcessRecord(pid=pid, ppid=pid - 1, name="n", status="S") for pid in range(2, depth + 1)]
        lines = list(iter_lines(build_forest(records)))

        assert len(lines) == depth
        for level, line in enumerate(lines):
            assert line == " " * level + f"|- n[{level + 1}] S"

    @pytest.mark.parametrize("fanout", [2, 10])
    def test_indent_tracks_depth(self, fanout):
        """Test every child line is indented exactly one unit deeper than its parent."""
        records = [ProcessRecord(pid=1, ppid=0, name="root", status="S")]
        pid = 2
        frontier = [1]
        for _ in range(4):
            next_frontier = []
            for parent in frontier:
                for _ in range(fanout):
                    records.append(ProcessRecord(pid=pid, ppid=parent, name="n", status="S"))
                    next_frontier.append(pid)
                    pid += 1
            frontier = next_frontier
        forest = build_forest(records)
        lines = list(iter_lines(forest))

        assert len(lines) == len(records)
        previous = -1
        for line in lines:
            level = len(line) - len(line.lstrip(" "))
            assert level <= previous + 1
            previous = level

    def test_build_and_print_time(self):
        """Test building and printing a large table stays fast (no quadratic linking)."""
        records = [ProcessRecord(pid=1, ppid=0, name="init", status="S")]
        records += [
            ProcessRecord(pid=pid, ppid=max(1, pid // 2), name="n", status="S")
            for pid in range(2, 50_001)
        ]

        start = time.perf_counter()
        written = print_forest(build_forest(records), io.StringIO())
        elapsed = time.perf_counter() - start

        assert written == len(records)
        assert elapsed < 5.0, f"Build and print took {elapsed:.2f}s"
