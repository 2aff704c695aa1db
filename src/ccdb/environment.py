"""Include paths that the compiler driver picks up from the environment.

See https://gcc.gnu.org/onlinedocs/cpp/Environment-Variables.html
"""

import os
from collections.abc import Mapping

# Checked in this order; each directory becomes ``-I <dir>``.
INCLUDE_PATH_VARIABLES = ("CPATH", "C_INCLUDE_PATH", "CPLUS_INCLUDE_PATH")
# Each directory becomes ``-isystem <dir>``.
SYSTEM_INCLUDE_PATH_VARIABLES = ("OBJC_INCLUDE_PATH",)


def split_path_list(value: str, sep: str = os.pathsep) -> list[str]:
    """Split a ``PATH``-style list into its segments.

    An empty value has no segments.  Empty segments inside a non-empty value
    are kept as ``""`` (``":/opt/inc"`` gives ``["", "/opt/inc"]``).
    """
    if not value:
        return []
    return value.split(sep)


def flags_from_environment(environment: Mapping[str, str]) -> list[str]:
    """Build the directory-search flags implied by *environment*."""
    flags: list[str] = []

    def insert(value: str, flag: str) -> None:
        for segment in split_path_list(value):
            # an empty segment means the current working directory
            flags.extend((flag, segment or "."))

    for name in INCLUDE_PATH_VARIABLES:
        if name in environment:
            insert(environment[name], "-I")
    for name in SYSTEM_INCLUDE_PATH_VARIABLES:
        if name in environment:
            insert(environment[name], "-isystem")
    return flags
