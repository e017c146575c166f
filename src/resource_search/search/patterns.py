"""Case-insensitive text matching with glob-style wildcards.

Only two wildcard markers exist:
- ``*`` matches any run of characters, including the empty run
- ``?`` matches exactly one character

Patterns with wildcards are anchored to the whole value. Text without
wildcards is matched as a case-insensitive substring.
"""

from __future__ import annotations

from functools import lru_cache
import re

from resource_search.domain.query import has_wildcard


def fold(text: str) -> str:
    """Normalize text for case-insensitive comparison."""
    return text.casefold()


@lru_cache(maxsize=512)
def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """Translate a wildcard pattern into an anchored, case-insensitive regex.

    Every other character is escaped, so user input never reaches the regex
    engine as syntax.

    Examples:
        >>> bool(compile_wildcard("web-*").fullmatch("web-vm-01"))
        True
        >>> bool(compile_wildcard("vm-0?").fullmatch("vm-012"))
        False
    """
    parts: list[str] = []
    for char in fold(pattern):
        if char == "*":
            # Collapse runs of stars; "**" means the same as "*"
            if not parts or parts[-1] != ".*":
                parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def matches(folded_text: str, needle: str) -> bool:
    """Return True when ``needle`` matches already-folded text.

    Args:
        folded_text: Field content passed through :func:`fold`.
        needle: Query term or filter value as typed.
    """
    if has_wildcard(needle):
        return compile_wildcard(needle).fullmatch(folded_text) is not None
    return fold(needle) in folded_text


def starts_with_wildcard(pattern: str) -> bool:
    return bool(pattern) and pattern[0] in "*?"
