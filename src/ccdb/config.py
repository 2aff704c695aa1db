"""Configuration loader for ccdb.

Reads ``ccdb.toml`` and exposes the compiler lists the recognizer needs::

    [compilers]
    recognize = ["/opt/cross/bin/cc-wrapper"]   # always treated as GNU compilers
    exclude = ["/usr/bin/ccache"]               # never treated as compilers

Usage::

    from ccdb.config import load_config
    cfg = load_config()
    tool = cfg.tool()
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

from ccdb.gcc import ToolGcc

CONFIG_NAME = "ccdb.toml"


@dataclass
class Config:
    """Parsed configuration; relative paths are resolved against the config file."""

    # --- [compilers] ---
    recognize: List[Path] = field(default_factory=list)
    exclude: List[Path] = field(default_factory=list)

    def tool(self) -> ToolGcc:
        """Build the GCC tool configured with these compiler lists."""
        return ToolGcc(paths=self.recognize, exclude=self.exclude)


def _resolve(root: Path, rel: str) -> Path:
    """Resolve a path relative to the config directory."""
    p = Path(rel)
    if p.is_absolute():
        return p
    return root / p


def _path_list(root: Path, section: dict, key: str) -> List[Path]:
    value = section.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"[compilers] {key} must be a list of strings, got {value!r}")
    return [_resolve(root, v) for v in value]


def _find_config(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* (or cwd) looking for ccdb.toml."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        path = candidate / CONFIG_NAME
        if path.exists():
            return path
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def load_config(path: Optional[Path] = None) -> Config:
    """Load ccdb.toml.

    Args:
        path: Explicit config file.  When ``None`` the file is searched for
              from the current directory upward and defaults are returned
              if none is found.

    Raises:
        FileNotFoundError: *path* was given but does not exist.
        ValueError: the file is not valid TOML or has wrongly typed keys.
    """
    if path is None:
        path = _find_config()
        if path is None:
            return Config()
    elif not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"{path}: {exc}") from exc

    root = path.resolve().parent
    compilers = raw.get("compilers", {})
    if not isinstance(compilers, dict):
        raise ValueError(f"{path}: [compilers] must be a table")

    return Config(
        recognize=_path_list(root, compilers, "recognize"),
        exclude=_path_list(root, compilers, "exclude"),
    )
