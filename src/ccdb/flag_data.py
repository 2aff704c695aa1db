"""GCC-compatible compiler flag table.

Source: https://gcc.gnu.org/onlinedocs/gcc/Option-Summary.html

Each row is ``rule(spelling, arity, match, category[, must_stick])``.
Exact spellings always beat prefix spellings; among prefixes the longest
spelling wins (see :mod:`ccdb.parser`), so catch-all prefixes such as
``-f`` or ``-W`` never shadow the specific rows listed here.
"""

from ccdb.flags import FlagCategory, FlagRule, MatchMode, rule

EXACT = MatchMode.EXACT
PARTIAL = MatchMode.PARTIAL
BOTH = MatchMode.BOTH

KIND_OF_OUTPUT = FlagCategory.OUTPUT_KIND
NO_LINKING = FlagCategory.OUTPUT_KIND_NO_LINKING
OUTPUT_PATH = FlagCategory.OUTPUT_KIND_OUTPUT_PATH
INFO = FlagCategory.OUTPUT_KIND_INFO
PREPROCESSOR = FlagCategory.PREPROCESSOR
PREPROCESSOR_MAKE = FlagCategory.PREPROCESSOR_MAKE
DIRECTORY_SEARCH = FlagCategory.DIRECTORY_SEARCH
DIRECTORY_SEARCH_LINKER = FlagCategory.DIRECTORY_SEARCH_LINKER
LINKER = FlagCategory.LINKER
OTHER = FlagCategory.OTHER

GCC_FLAGS: tuple[FlagRule, ...] = (
    # Overall options
    rule("-x", 1, BOTH, KIND_OF_OUTPUT),
    rule("-c", 0, EXACT, NO_LINKING),
    rule("-S", 0, EXACT, NO_LINKING),
    rule("-E", 0, EXACT, NO_LINKING),
    rule("-o", 1, BOTH, OUTPUT_PATH),
    rule("-dumpbase", 1, EXACT, KIND_OF_OUTPUT),
    rule("-dumpbase-ext", 1, EXACT, KIND_OF_OUTPUT),
    rule("-dumpdir", 1, EXACT, KIND_OF_OUTPUT),
    rule("-v", 0, EXACT, KIND_OF_OUTPUT),
    rule("-###", 0, EXACT, KIND_OF_OUTPUT),
    rule("-pass-exit-codes", 0, EXACT, KIND_OF_OUTPUT),
    rule("-pipe", 0, EXACT, KIND_OF_OUTPUT),
    rule("-specs", 0, PARTIAL, KIND_OF_OUTPUT, must_stick=True),
    rule("-wrapper", 1, EXACT, KIND_OF_OUTPUT),
    rule("-ffile-prefix-map", 0, PARTIAL, KIND_OF_OUTPUT, must_stick=True),
    rule("-fplugin", 0, PARTIAL, KIND_OF_OUTPUT, must_stick=True),
    rule("@", 0, PARTIAL, KIND_OF_OUTPUT),
    # Queries that print something and exit
    rule("--help", 0, BOTH, INFO, must_stick=True),
    rule("--target-help", 0, EXACT, INFO),
    rule("--version", 0, EXACT, INFO),
    rule("-dumpversion", 0, EXACT, INFO),
    rule("-dumpfullversion", 0, EXACT, INFO),
    rule("-dumpmachine", 0, EXACT, INFO),
    rule("-dumpspecs", 0, EXACT, INFO),
    rule("-print-", 0, PARTIAL, INFO),
    # Preprocessor options
    rule("-A", 1, BOTH, PREPROCESSOR),
    rule("-D", 1, BOTH, PREPROCESSOR),
    rule("-U", 1, BOTH, PREPROCESSOR),
    rule("-include", 1, EXACT, PREPROCESSOR),
    rule("-imacros", 1, EXACT, PREPROCESSOR),
    rule("-undef", 0, EXACT, PREPROCESSOR),
    rule("-pthread", 0, EXACT, PREPROCESSOR),
    rule("-C", 0, EXACT, PREPROCESSOR),
    rule("-CC", 0, EXACT, PREPROCESSOR),
    rule("-P", 0, EXACT, PREPROCESSOR),
    rule("-traditional", 0, BOTH, PREPROCESSOR),
    rule("-trigraphs", 0, EXACT, PREPROCESSOR),
    rule("-remap", 0, EXACT, PREPROCESSOR),
    rule("-H", 0, EXACT, PREPROCESSOR),
    rule("-Xpreprocessor", 1, EXACT, PREPROCESSOR),
    rule("-Wp,", 0, PARTIAL, PREPROCESSOR),
    # Dependency file generation
    rule("-M", 0, EXACT, PREPROCESSOR_MAKE),
    rule("-MM", 0, EXACT, PREPROCESSOR_MAKE),
    rule("-MG", 0, EXACT, PREPROCESSOR_MAKE),
    rule("-MP", 0, EXACT, PREPROCESSOR_MAKE),
    rule("-MD", 0, EXACT, PREPROCESSOR_MAKE),
    rule("-MMD", 0, EXACT, PREPROCESSOR_MAKE),
    rule("-MF", 1, BOTH, PREPROCESSOR_MAKE),
    rule("-MT", 1, BOTH, PREPROCESSOR_MAKE),
    rule("-MQ", 1, BOTH, PREPROCESSOR_MAKE),
    # Directory search
    rule("-I", 1, BOTH, DIRECTORY_SEARCH),
    rule("-iplugindir", 0, PARTIAL, DIRECTORY_SEARCH, must_stick=True),
    rule("-iquote", 1, BOTH, DIRECTORY_SEARCH),
    rule("-isystem", 1, BOTH, DIRECTORY_SEARCH),
    rule("-idirafter", 1, BOTH, DIRECTORY_SEARCH),
    rule("-iprefix", 1, EXACT, DIRECTORY_SEARCH),
    rule("-iwithprefix", 1, EXACT, DIRECTORY_SEARCH),
    rule("-iwithprefixbefore", 1, EXACT, DIRECTORY_SEARCH),
    rule("-isysroot", 1, EXACT, DIRECTORY_SEARCH),
    rule("-imultilib", 1, EXACT, DIRECTORY_SEARCH),
    rule("-B", 1, BOTH, DIRECTORY_SEARCH),
    rule("--sysroot", 1, BOTH, DIRECTORY_SEARCH, must_stick=True),
    rule("-L", 1, BOTH, DIRECTORY_SEARCH_LINKER),
    # Linker options
    rule("-flinker-output", 0, PARTIAL, LINKER, must_stick=True),
    rule("-fuse-ld", 0, PARTIAL, LINKER, must_stick=True),
    rule("-l", 1, BOTH, LINKER),
    rule("-nostartfiles", 0, EXACT, LINKER),
    rule("-nodefaultlibs", 0, EXACT, LINKER),
    rule("-nolibc", 0, EXACT, LINKER),
    rule("-nostdlib", 0, EXACT, LINKER),
    rule("-e", 1, EXACT, LINKER),
    rule("-entry", 0, PARTIAL, LINKER, must_stick=True),
    rule("-pie", 0, EXACT, LINKER),
    rule("-no-pie", 0, EXACT, LINKER),
    rule("-static-pie", 0, EXACT, LINKER),
    rule("-r", 0, EXACT, LINKER),
    rule("-rdynamic", 0, EXACT, LINKER),
    rule("-s", 0, EXACT, LINKER),
    rule("-symbolic", 0, EXACT, LINKER),
    rule("-static", 0, BOTH, LINKER),
    rule("-shared", 0, BOTH, LINKER),
    rule("-T", 1, EXACT, LINKER),
    rule("-Xlinker", 1, EXACT, LINKER),
    rule("-Wl,", 0, PARTIAL, LINKER),
    rule("-u", 1, EXACT, LINKER),
    rule("-z", 1, EXACT, LINKER),
    # Everything else: passed through untouched
    rule("-Xassembler", 1, EXACT, OTHER),
    rule("-Wa,", 0, PARTIAL, OTHER),
    rule("-ansi", 0, EXACT, OTHER),
    rule("-aux-info", 1, EXACT, OTHER),
    rule("-std", 0, PARTIAL, OTHER, must_stick=True),
    rule("-O", 0, BOTH, OTHER),
    rule("-g", 0, BOTH, OTHER),
    rule("-f", 0, PARTIAL, OTHER),
    rule("-m", 0, PARTIAL, OTHER),
    rule("-p", 0, PARTIAL, OTHER),
    rule("-W", 0, PARTIAL, OTHER),
    rule("-no", 0, PARTIAL, OTHER),
    rule("-tno", 0, PARTIAL, OTHER),
    rule("-save", 0, PARTIAL, OTHER),
    rule("-d", 0, PARTIAL, OTHER),
    rule("-E", 0, PARTIAL, OTHER),
    rule("-Q", 0, PARTIAL, OTHER),
    rule("-X", 0, PARTIAL, OTHER),
    rule("-Y", 0, PARTIAL, OTHER),
    rule("--", 0, PARTIAL, OTHER),
)

# Dependency-only modes: the driver stops before compiling.
NO_COMPILATION_FLAGS: frozenset[str] = frozenset({"-M", "-MM", "-E"})

# Categories that never matter when a single source is analysed on its own.
FILTERED_CATEGORIES: frozenset[FlagCategory] = frozenset(
    {
        FlagCategory.LINKER,
        FlagCategory.PREPROCESSOR_MAKE,
        FlagCategory.DIRECTORY_SEARCH_LINKER,
    }
)
