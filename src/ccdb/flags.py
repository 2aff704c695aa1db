"""Compiler flag grammar primitives.

FlagSpec:      how a flag spelling is matched and how many values it takes
FlagRule:      one dictionary row (spelling + spec + category)
ClassifiedFlag: one parsed flag, replayable verbatim

The category drives every later decision (pass detection, filtering), so it
is always looked up from the table and never guessed from the token shape.
"""

from dataclasses import dataclass
from enum import Enum


class MatchMode(Enum):
    """How a dictionary key is compared against a command-line token."""

    EXACT = "exact"
    PARTIAL = "partial"
    BOTH = "both"

    @property
    def exact(self) -> bool:
        return self is not MatchMode.PARTIAL

    @property
    def partial(self) -> bool:
        return self is not MatchMode.EXACT


class FlagCategory(Enum):
    """Semantic class of a compiler flag."""

    OUTPUT_KIND = "output_kind"
    OUTPUT_KIND_NO_LINKING = "output_kind_no_linking"
    OUTPUT_KIND_OUTPUT_PATH = "output_kind_output_path"
    OUTPUT_KIND_INFO = "output_kind_info"
    PREPROCESSOR = "preprocessor"
    PREPROCESSOR_MAKE = "preprocessor_make"
    DIRECTORY_SEARCH = "directory_search"
    DIRECTORY_SEARCH_LINKER = "directory_search_linker"
    LINKER = "linker"
    SOURCE = "source"
    OTHER = "other"


class GrammarError(ValueError):
    """The flag table itself is malformed; no parser can be built from it."""


@dataclass(frozen=True)
class FlagSpec:
    """Arity and matching behaviour of a single flag spelling."""

    arity: int
    match: MatchMode
    must_stick: bool = False


@dataclass(frozen=True)
class FlagRule:
    """A flag spelling with its spec and category."""

    key: str
    spec: FlagSpec
    category: FlagCategory


@dataclass(frozen=True)
class ClassifiedFlag:
    """A flag token (plus any consumed value token) and its category."""

    category: FlagCategory
    arguments: tuple[str, ...]

    @property
    def value(self) -> str:
        """The last consumed token: the value for separate-form flags."""
        return self.arguments[-1]


ClassifiedFlags = list[ClassifiedFlag]


def rule(key: str, arity: int, match: MatchMode, category: FlagCategory, must_stick: bool = False) -> FlagRule:
    """Shorthand for building a table row."""
    return FlagRule(key=key, spec=FlagSpec(arity=arity, match=match, must_stick=must_stick), category=category)


def validate_rules(rules: tuple[FlagRule, ...] | list[FlagRule]) -> None:
    """Raise :class:`GrammarError` if any row in *rules* can never be parsed.

    Checked conditions:
    - the key is empty
    - arity is outside ``{0, 1}``
    - an exact-only row with arity 1 must stick to its value (it can never
      carry a glued value, so it can never match)
    - the same spelling appears twice with overlapping match modes
    """
    seen: dict[tuple[str, bool], FlagRule] = {}
    for row in rules:
        if not row.key:
            raise GrammarError(f"empty flag spelling for category {row.category.name}")
        if row.spec.arity not in (0, 1):
            raise GrammarError(f"flag {row.key!r} has unsupported arity {row.spec.arity}")
        if row.spec.match is MatchMode.EXACT and row.spec.arity == 1 and row.spec.must_stick:
            raise GrammarError(f"flag {row.key!r} is exact-only but requires a glued value")
        for mode in (True, False):
            applies = row.spec.match.exact if mode else row.spec.match.partial
            if not applies:
                continue
            other = seen.get((row.key, mode))
            if other is not None:
                kind = "exact" if mode else "partial"
                raise GrammarError(f"flag {row.key!r} has two {kind} entries")
            seen[(row.key, mode)] = row
