"""gcc.py – Compilation semantics of GNU-compatible compiler drivers.

Given one intercepted :class:`~ccdb.core.Command`, decide whether it runs a
compilation pass and, if so, rebuild one single-source invocation per
compiled file.

Usage::

    from ccdb.gcc import ToolGcc

    tool = ToolGcc(paths=[Path("/opt/cross/bin/cc-wrapper")])
    if tool.recognize(command.program):
        entries = tool.compilations(command)
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from ccdb.core import Command, Entry
from ccdb.environment import flags_from_environment
from ccdb.flag_data import FILTERED_CATEGORIES, GCC_FLAGS, NO_COMPILATION_FLAGS
from ccdb.flags import ClassifiedFlag, ClassifiedFlags, FlagCategory
from ccdb.parser import FlagStreamParser

# Records go through the stdlib "ccdb" logger, never straight to a stream.
log = structlog.wrap_logger(
    logging.getLogger(__name__),
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
)

# Built at import time: a broken flag table stops the program here.
PARSER = FlagStreamParser(GCC_FLAGS)

_EXECUTABLE_PATTERNS = (
    r"cc|c\+\+|cxx|CC",
    r"([^-]*-)*[mg]cc(-\d+(\.\d+){0,2})?",
    r"([^-]*-)*[mg]\+\+(-\d+(\.\d+){0,2})?",
    r"([^-]*-)*g?fortran(-\d+(\.\d+){0,2})?",
)
_EXECUTABLE_RE = re.compile("|".join(f"(?:{p})" for p in _EXECUTABLE_PATTERNS))


def match_executable_name(program: str | Path) -> bool:
    """Return ``True`` if the basename of *program* looks like a GNU driver."""
    return _EXECUTABLE_RE.fullmatch(Path(program).name) is not None


def parse_flags(command: Command) -> ClassifiedFlags:
    """Classify the arguments of *command* (argv[0] excluded)."""
    return PARSER.parse(command.arguments[1:])


def runs_compilation_pass(flags: ClassifiedFlags) -> bool:
    """Return ``False`` for empty, info-query, or dependency-only invocations."""
    if not flags:
        return False
    for flag in flags:
        if flag.category is FlagCategory.OUTPUT_KIND_INFO:
            return False
        # -MD/-MMD still compile, only -M/-MM alone stop before it
        if flag.category is FlagCategory.PREPROCESSOR_MAKE and flag.arguments[0] in NO_COMPILATION_FLAGS:
            return False
    return True


def source_file(flag: ClassifiedFlag) -> str | None:
    if flag.category is FlagCategory.SOURCE:
        return flag.arguments[0]
    return None


def source_files(flags: ClassifiedFlags) -> list[str]:
    """Source paths as written on the command line, in order."""
    return [source for source in map(source_file, flags) if source is not None]


def output_file(flags: ClassifiedFlags) -> str | None:
    """The value of the first ``-o`` flag, if any."""
    for flag in flags:
        if flag.category is FlagCategory.OUTPUT_KIND_OUTPUT_PATH:
            if len(flag.arguments) > 1:
                return flag.value
            # glued form: -ofile
            return flag.value[len("-o") :]
    return None


def filter_arguments(flags: ClassifiedFlags, source: str) -> list[str]:
    """Rebuild the arguments that compile *source* alone.

    Link-only, dependency-generation, and linker-search flags are dropped,
    so are the other sources.  A ``-c`` is prepended when the original call
    would have linked.
    """
    no_linking = any(flag.category is FlagCategory.OUTPUT_KIND_NO_LINKING for flag in flags)
    result = [] if no_linking else ["-c"]
    for flag in flags:
        if flag.category in FILTERED_CATEGORIES:
            continue
        candidate = source_file(flag)
        if candidate is not None and candidate != source:
            continue
        result.extend(flag.arguments)
    return result


def make_absolute(path: str | Path, directory: Path) -> Path:
    path = Path(path)
    return path if path.is_absolute() else directory / path


class ToolGcc:
    """Recognizer and entry builder for GCC, Clang, and their cross variants."""

    def __init__(self, paths: Iterable[str | Path] = (), exclude: Iterable[str | Path] = ()) -> None:
        self.paths = frozenset(Path(p) for p in paths)
        self.exclude = frozenset(Path(p) for p in exclude)

    def recognize(self, program: str | Path) -> bool:
        """Return ``True`` if *program* is a compiler this tool handles."""
        program = Path(program)
        if program in self.exclude:
            return False
        return program in self.paths or match_executable_name(program)

    def compilations(self, command: Command) -> list[Entry]:
        """Return one :class:`Entry` per source compiled by *command*."""
        log.debug("recognized as GNU compiler", program=str(command.program))
        flags = parse_flags(command)
        if not runs_compilation_pass(flags):
            log.debug("compiler call does not run compilation pass")
            return []
        sources = source_files(flags)
        if not sources:
            log.debug("source files not found for compilation")
            return []
        output = output_file(flags)
        extra = flags_from_environment(command.environment)

        entries = []
        for source in sources:
            arguments = [str(command.program), *filter_arguments(flags, source), *extra]
            entries.append(
                Entry(
                    file=make_absolute(source, command.working_dir),
                    directory=command.working_dir,
                    output=make_absolute(output, command.working_dir) if output is not None else None,
                    arguments=tuple(arguments),
                )
            )
        return entries
