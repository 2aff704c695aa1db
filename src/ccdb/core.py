"""core.py – Records exchanged with the interception and output layers.

Command comes in (one per observed process launch), Entry goes out (one per
compiled source file).  Both are immutable.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Command:
    """A single intercepted process execution.

    ``arguments`` is the argv as executed, ``arguments[0]`` included.
    ``working_dir`` must be absolute: entry paths are resolved against it.
    """

    program: Path
    arguments: tuple[str, ...]
    working_dir: Path
    environment: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.working_dir.is_absolute():
            raise ValueError(f"working directory must be absolute: {self.working_dir}")

    @classmethod
    def from_argv(
        cls,
        argv: list[str] | tuple[str, ...],
        working_dir: str | Path,
        environment: Mapping[str, str] | None = None,
        program: str | Path | None = None,
    ) -> "Command":
        """Build a command from a raw argv; *program* defaults to ``argv[0]``."""
        if not argv:
            raise ValueError("argv must contain at least the program name")
        return cls(
            program=Path(program if program is not None else argv[0]),
            arguments=tuple(argv),
            working_dir=Path(working_dir),
            environment=dict(environment or {}),
        )


@dataclass(frozen=True)
class Entry:
    """One compilation database record: a single source compiled on its own."""

    file: Path
    directory: Path
    output: Path | None
    arguments: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form used by compilation databases."""
        data: dict[str, Any] = {
            "file": str(self.file),
            "directory": str(self.directory),
            "arguments": list(self.arguments),
        }
        if self.output is not None:
            data["output"] = str(self.output)
        return data
