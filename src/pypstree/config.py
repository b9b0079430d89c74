"""Runtime settings for pypstree, read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from pypstree.log import level_from_name
from pypstree.render import DEFAULT_INDENT_UNIT
from pypstree.scanner import DEFAULT_PROC_ROOT, SCANNERS

ENV_PREFIX = "PYPSTREE_"


@dataclass(slots=True, frozen=True)
class Settings:
    """Settings for one run."""

    proc_root: str = DEFAULT_PROC_ROOT
    backend: str = "procfs"
    log_level: str = "WARNING"
    indent_unit: str = DEFAULT_INDENT_UNIT

    def __post_init__(self) -> None:
        if self.backend not in SCANNERS:
            raise ValueError(
                f"{ENV_PREFIX}BACKEND must be one of {', '.join(SCANNERS)}, got {self.backend!r}"
            )
        level_from_name(self.log_level)
        if not self.indent_unit:
            raise ValueError(f"{ENV_PREFIX}INDENT must not be empty")
        if not self.proc_root:
            raise ValueError(f"{ENV_PREFIX}PROC_ROOT must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from ``PYPSTREE_*`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        if environ is None:
            environ = os.environ
        defaults = cls()
        return cls(
            proc_root=environ.get(f"{ENV_PREFIX}PROC_ROOT", defaults.proc_root),
            backend=environ.get(f"{ENV_PREFIX}BACKEND", defaults.backend).lower(),
            log_level=environ.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
            indent_unit=environ.get(f"{ENV_PREFIX}INDENT", defaults.indent_unit),
        )
