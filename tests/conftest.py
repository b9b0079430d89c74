"""Shared fixtures for pypstree tests."""

import logging

import pytest


@pytest.fixture
def fake_proc(tmp_path):
    """
    Factory building a fake procfs tree under tmp_path.

    Call it with ``{entry_name: stat_text_or_None}``; None creates the
    directory without a stat file.
    """
    root = tmp_path / "proc"
    root.mkdir()

    def make(entries: dict[str, str | None]) -> str:
        for name, stat in entries.items():
            entry = root / name
            entry.mkdir()
            if stat is not None:
                (entry / "stat").write_text(stat)
        return str(root)

    return make


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() changes so tests do not leak logging state."""
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers
