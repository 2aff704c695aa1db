"""parser.py – Turn a compiler argument vector into classified flags.

Three matchers are tried in order at every position:

1. :class:`FlagMatcher` looks the token up in the flag table.
2. :func:`match_source` takes any token the table does not know as a source.
3. :func:`match_everything_else` keeps the pipeline total; it never fires
   while (2) accepts every token.

The stream parser walks left to right, never backtracks, and consumes every
token exactly once (a flag value counts as consumed by its flag).
"""

from collections.abc import Callable, Iterator, Sequence

from ccdb.flags import ClassifiedFlag, ClassifiedFlags, FlagCategory, FlagRule, validate_rules

Match = tuple[ClassifiedFlag, int]
Matcher = Callable[[Sequence[str], int], Match | None]


class FlagMatcher:
    """Match one token against a flag table.

    Priority between rows is fixed: rows whose spelling equals the token come
    first (table order), then rows whose spelling is a prefix of the token,
    longest spelling first.  A row that cannot get the value it needs is
    skipped and the next candidate is tried.
    """

    def __init__(self, rules: Sequence[FlagRule]) -> None:
        validate_rules(rules)
        self._exact: dict[str, list[FlagRule]] = {}
        for row in rules:
            if row.spec.match.exact:
                self._exact.setdefault(row.key, []).append(row)
        # sorted() is stable, so equal lengths keep table order
        self._partial = sorted(
            (row for row in rules if row.spec.match.partial),
            key=lambda row: len(row.key),
            reverse=True,
        )

    def candidates(self, token: str) -> Iterator[FlagRule]:
        """Yield the rows that could describe *token*, best first."""
        yield from self._exact.get(token, ())
        for row in self._partial:
            if token.startswith(row.key):
                yield row

    def __call__(self, tokens: Sequence[str], index: int) -> Match | None:
        token = tokens[index]
        for row in self.candidates(token):
            count = _consumed(row, tokens, index)
            if count:
                return ClassifiedFlag(row.category, tuple(tokens[index : index + count])), count
        return None


def _consumed(row: FlagRule, tokens: Sequence[str], index: int) -> int:
    """Number of tokens *row* takes at *index*, or 0 if it cannot match."""
    if row.spec.arity == 0:
        return 1
    if len(tokens[index]) > len(row.key):
        # value glued to the spelling: -Ipath, --sysroot=/x
        return 1
    if row.spec.must_stick:
        return 0
    if index + 1 < len(tokens):
        return 2
    return 0


def match_source(tokens: Sequence[str], index: int) -> Match | None:
    return ClassifiedFlag(FlagCategory.SOURCE, (tokens[index],)), 1


def match_everything_else(tokens: Sequence[str], index: int) -> Match | None:
    return ClassifiedFlag(FlagCategory.OTHER, (tokens[index],)), 1


class FlagStreamParser:
    """Repeatedly apply the matcher chain over a whole argument vector."""

    def __init__(self, rules: Sequence[FlagRule]) -> None:
        self.matchers: tuple[Matcher, ...] = (
            FlagMatcher(rules),
            match_source,
            match_everything_else,
        )

    def parse(self, tokens: Sequence[str]) -> ClassifiedFlags:
        """Classify *tokens*; never raises for unknown input."""
        flags: ClassifiedFlags = []
        index = 0
        while index < len(tokens):
            for matcher in self.matchers:
                found = matcher(tokens, index)
                if found is not None:
                    break
            flag, count = found  # type: ignore[misc]
            flags.append(flag)
            index += count
        return flags
