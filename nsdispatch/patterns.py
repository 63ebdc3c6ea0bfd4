"""Wildcard pattern compilation.

Namespaces and events are registered as wildcard strings:

- ``*`` matches zero or more of any character, anywhere in the string.
- ``all`` on its own is shorthand for ``*``.  Inside a longer string it
  is an ordinary literal, so ``"ball"`` only ever matches ``"ball"``.

Everything else is literal; regex metacharacters are escaped before the
wildcards are expanded.  Patterns are anchored at both ends.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache

WILDCARD = "*"
ALL_TOKEN = "all"


@dataclass(frozen=True)
class WildcardPattern:
    """Compiled, anchored matcher for one namespace or event string.

    Equality and hashing use the translated expression only, so ``"*"``
    and ``"all"`` are the same pattern.

    Attributes:
        source: The wildcard string as first registered.
        expression: Regex source produced by :func:`translate`.
        regex: Compiled *expression*, matched with ``fullmatch``.
    """

    source: str = field(compare=False)
    expression: str
    regex: re.Pattern[str] = field(compare=False, repr=False)

    def matches(self, target: str) -> bool:
        """Return True if *target* matches the whole pattern."""
        return self.regex.fullmatch(target) is not None

    def __str__(self) -> str:
        return self.source


def translate(wildcard: str) -> str:
    """Translate a wildcard string into an unanchored regex source.

    Args:
        wildcard: Namespace or event string, possibly with wildcards.

    Returns:
        Regex source; anchoring is left to ``fullmatch``.
    """
    if wildcard == ALL_TOKEN:
        return ".*"
    return ".*".join(re.escape(part) for part in wildcard.split(WILDCARD))


@lru_cache(maxsize=1024)
def compile_pattern(wildcard: str) -> WildcardPattern:
    """Compile *wildcard* into a :class:`WildcardPattern`.

    Compilation never fails: every literal portion is escaped.

    Args:
        wildcard: Namespace or event string.

    Returns:
        The compiled pattern (cached per source string).
    """
    expression = translate(wildcard)
    return WildcardPattern(
        source=wildcard, expression=expression, regex=re.compile(expression)
    )
