"""Tests for GNU compiler recognition and compilation entry building."""

import logging
from pathlib import Path

import pytest

from ccdb.cli import setup_logging
from ccdb.core import Command, Entry
from ccdb.flags import ClassifiedFlag, FlagCategory
from ccdb.gcc import (
    PARSER,
    ToolGcc,
    filter_arguments,
    make_absolute,
    match_executable_name,
    output_file,
    runs_compilation_pass,
    source_files,
)

CWD = Path("/home/user/project")


def _entries(*argv, env=None, program=None):
    command = Command.from_argv(list(argv), CWD, environment=env or {}, program=program)
    return ToolGcc().compilations(command)


# ---------------------------------------------------------------------------
# Executable recognition
# ---------------------------------------------------------------------------


class TestRecognize:
    @pytest.mark.parametrize(
        "program",
        [
            "cc",
            "c++",
            "cxx",
            "CC",
            "/usr/bin/gcc",
            "/usr/bin/g++",
            "/usr/bin/gcc-9",
            "/usr/bin/gcc-9.3.0",
            "/usr/bin/x86_64-linux-gnu-g++-11",
            "/opt/arm/bin/arm-none-eabi-gcc",
            "/usr/bin/gfortran",
            "/usr/bin/x86_64-w64-mingw32-gcc",
        ],
    )
    def test_accepted(self, program):
        assert match_executable_name(program)
        assert ToolGcc().recognize(program)

    @pytest.mark.parametrize(
        "program",
        ["/usr/bin/ld", "/usr/bin/gcc-ar", "/usr/lib/gcc/cc1", "/usr/bin/make", "/bin/sh", "ccache"],
    )
    def test_rejected(self, program):
        assert not match_executable_name(program)
        assert not ToolGcc().recognize(program)

    def test_allow_list(self):
        tool = ToolGcc(paths=["/opt/bin/wrapper"])
        assert tool.recognize(Path("/opt/bin/wrapper"))
        assert not tool.recognize("/opt/other/wrapper")

    def test_exclude_wins(self):
        tool = ToolGcc(paths=["/usr/bin/gcc"], exclude=["/usr/bin/gcc"])
        assert not tool.recognize("/usr/bin/gcc")
        assert tool.recognize("/usr/bin/g++")


# ---------------------------------------------------------------------------
# Compilation pass
# ---------------------------------------------------------------------------


class TestCompilationPass:
    def test_empty(self):
        assert not runs_compilation_pass([])

    def test_plain_compile(self):
        assert runs_compilation_pass(PARSER.parse(["-c", "a.c"]))

    @pytest.mark.parametrize("info", ["--version", "--help", "--target-help", "-dumpversion"])
    def test_info_query(self, info):
        assert not runs_compilation_pass(PARSER.parse(["-c", "a.c", info]))

    def test_dependency_only(self):
        assert not runs_compilation_pass(PARSER.parse(["-M", "-c", "a.c"]))
        assert not runs_compilation_pass(PARSER.parse(["-MM", "a.c"]))

    def test_dependency_side_output_still_compiles(self):
        assert runs_compilation_pass(PARSER.parse(["-MD", "-c", "a.c"]))
        assert runs_compilation_pass(PARSER.parse(["-MMD", "-MF", "a.d", "-c", "a.c"]))

    def test_checks_flag_value_not_category(self):
        flags = [
            ClassifiedFlag(FlagCategory.PREPROCESSOR_MAKE, ("-MP",)),
            ClassifiedFlag(FlagCategory.SOURCE, ("a.c",)),
        ]
        assert runs_compilation_pass(flags)


# ---------------------------------------------------------------------------
# Sources, output and per-source filtering
# ---------------------------------------------------------------------------


class TestExtraction:
    def test_sources_in_order(self):
        assert source_files(PARSER.parse(["b.c", "-c", "a.c"])) == ["b.c", "a.c"]

    def test_no_output(self):
        assert output_file(PARSER.parse(["-c", "a.c"])) is None

    def test_output_separate(self):
        assert output_file(PARSER.parse(["-c", "a.c", "-o", "a.o"])) == "a.o"

    def test_output_glued(self):
        assert output_file(PARSER.parse(["-c", "a.c", "-oa.o"])) == "a.o"

    def test_first_output_wins(self):
        assert output_file(PARSER.parse(["-o", "first", "a.c", "-o", "second"])) == "first"

    def test_filter_prepends_c_when_linking(self):
        flags = PARSER.parse(["a.c", "-o", "a"])
        assert filter_arguments(flags, "a.c") == ["-c", "a.c", "-o", "a"]

    def test_filter_keeps_existing_pass(self):
        flags = PARSER.parse(["-S", "a.c"])
        assert filter_arguments(flags, "a.c") == ["-S", "a.c"]

    def test_filter_drops_link_and_make_flags(self):
        flags = PARSER.parse(["-MD", "-MF", "a.d", "-L/lib", "-lm", "-Wl,-z,now", "-O2", "-c", "a.c", "b.c"])
        assert filter_arguments(flags, "b.c") == ["-O2", "-c", "b.c"]

    def test_make_absolute(self):
        assert make_absolute("src/a.c", CWD) == CWD / "src" / "a.c"
        assert make_absolute("/abs/a.c", CWD) == Path("/abs/a.c")


# ---------------------------------------------------------------------------
# ToolGcc.compilations()
# ---------------------------------------------------------------------------


class TestCompilations:
    def test_compile_only(self):
        assert _entries("gcc", "-c", "foo.c") == [
            Entry(file=CWD / "foo.c", directory=CWD, output=None, arguments=("gcc", "-c", "foo.c"))
        ]

    def test_assemble_only_keeps_s(self):
        [entry] = _entries("gcc", "-S", "foo.c")
        assert entry.arguments == ("gcc", "-S", "foo.c")

    def test_linking_call_gets_c(self):
        [entry] = _entries("gcc", "foo.c", "-o", "foo")
        assert entry.arguments == ("gcc", "-c", "foo.c", "-o", "foo")
        assert entry.output == CWD / "foo"

    def test_version_yields_nothing(self):
        assert _entries("gcc", "--version") == []
        assert _entries("gcc", "-c", "foo.c", "--version") == []

    def test_dependency_only_yields_nothing(self):
        assert _entries("gcc", "-M", "-c", "a.c") == []

    def test_md_still_compiles(self):
        [entry] = _entries("gcc", "-MD", "-c", "a.c")
        assert entry.arguments == ("gcc", "-c", "a.c")

    def test_no_arguments(self):
        assert _entries("gcc") == []

    def test_no_sources(self):
        assert _entries("gcc", "-c", "-O2") == []

    def test_two_sources(self):
        first, second = _entries("gcc", "-Ia", "-Ib", "-c", "x.c", "y.c", "-o", "out")
        assert first.file == CWD / "x.c"
        assert first.arguments == ("gcc", "-Ia", "-Ib", "-c", "x.c", "-o", "out")
        assert second.file == CWD / "y.c"
        assert second.arguments == ("gcc", "-Ia", "-Ib", "-c", "y.c", "-o", "out")
        assert first.output == second.output == CWD / "out"
        assert first.directory == second.directory == CWD

    def test_environment_flags_appended(self):
        [entry] = _entries("gcc", "-c", "a.c", "-o", "a.o", env={"CPATH": "/usr/x:/usr/y"})
        assert entry.arguments == ("gcc", "-c", "a.c", "-o", "a.o", "-I", "/usr/x", "-I", "/usr/y")

    def test_environment_flags_per_entry(self):
        entries = _entries("gcc", "-c", "a.c", "b.c", env={"CPATH": "/usr/x"})
        assert all(e.arguments[-2:] == ("-I", "/usr/x") for e in entries)

    def test_linker_flag_dropped(self):
        [entry] = _entries("gcc", "-Wl,--as-needed", "-c", "a.c")
        assert entry.arguments == ("gcc", "-c", "a.c")

    def test_preprocess_only_is_kept(self):
        [entry] = _entries("gcc", "-E", "a.c")
        assert entry.arguments == ("gcc", "-E", "a.c")

    def test_program_path_replaces_argv0(self):
        [entry] = _entries("gcc", "-c", "a.c", program="/usr/bin/gcc")
        assert entry.arguments[0] == "/usr/bin/gcc"

    def test_absolute_source_kept(self):
        [entry] = _entries("cc", "-c", "/tmp/a.c", "-o", "/tmp/a.o")
        assert entry.file == Path("/tmp/a.c")
        assert entry.output == Path("/tmp/a.o")

    def test_entry_file_is_a_source_flag(self):
        argv = ["g++", "-std=c++17", "-DNDEBUG", "-c", "m.cc", "n.cc", "-lpthread"]
        flags = PARSER.parse(argv[1:])
        sources = {CWD / s for s in source_files(flags)}
        for entry in _entries(*argv):
            assert entry.file in sources


class TestEntry:
    def test_to_dict_without_output(self):
        entry = Entry(file=CWD / "a.c", directory=CWD, output=None, arguments=("cc", "-c", "a.c"))
        assert entry.to_dict() == {
            "file": str(CWD / "a.c"),
            "directory": str(CWD),
            "arguments": ["cc", "-c", "a.c"],
        }

    def test_to_dict_with_output(self):
        entry = Entry(file=CWD / "a.c", directory=CWD, output=CWD / "a.o", arguments=("cc",))
        assert entry.to_dict()["output"] == str(CWD / "a.o")

    def test_command_requires_argv(self):
        with pytest.raises(ValueError):
            Command.from_argv([], CWD)

    def test_relative_working_dir_rejected(self):
        with pytest.raises(ValueError, match="absolute"):
            Command.from_argv(["gcc", "-c", "a.c"], "build")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def library_logging():
    """Give the "ccdb" logger its import-time state, restore it afterwards."""
    logger = logging.getLogger("ccdb")
    saved = (logger.handlers[:], logger.level, logger.propagate)
    logger.handlers = [logging.NullHandler()]
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    yield logger
    logger.handlers, logger.level, logger.propagate = saved


class TestLogging:
    def test_non_results_print_nothing(self, library_logging, capsys):
        assert _entries("gcc", "--version") == []
        assert _entries("gcc", "-M", "-c", "a.c") == []
        assert _entries("gcc", "-c", "-O2") == []
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_verbose_goes_to_stderr(self, library_logging, capsys):
        setup_logging(verbose=True)
        assert _entries("gcc", "-c", "-O2") == []
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "source files not found for compilation" in captured.err
