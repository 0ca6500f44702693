"""Wildcard matching for translation keys.

Two semantics live here and are intentionally kept apart:

* ignore patterns (``matches_wildcard``): ``*`` matches zero or more
  characters inside one dotted segment, ``**`` matches across segments;
* dynamic patterns (``key_matches_dynamic_pattern``): ``*`` stands for a
  substituted runtime value and matches one or more non-dot characters.
"""
import functools
import re

_METACHARACTERS = re.compile(r"[+?^${}()|\[\]\\]")
_DOUBLE_STAR = "\x00"


def _escape(pattern: str) -> str:
    # '.' and '*' are left alone
    return _METACHARACTERS.sub(lambda match: "\\" + match.group(0), pattern)


@functools.lru_cache(maxsize=1024)
def wildcard_to_regex(pattern: str) -> re.Pattern:
    body = _escape(pattern)
    body = body.replace("**", _DOUBLE_STAR)
    body = body.replace("*", "[^.]*")
    body = body.replace(_DOUBLE_STAR, ".*")
    return re.compile(f"^{body}$")


@functools.lru_cache(maxsize=1024)
def dynamic_pattern_to_regex(pattern: str) -> re.Pattern:
    body = _escape(pattern).replace("*", "[^.]+")
    return re.compile(f"^{body}$")


def matches_wildcard(key: str, pattern: str) -> bool:
    if pattern == key:
        return True
    return wildcard_to_regex(pattern).match(key) is not None


def key_matches_dynamic_pattern(key: str, pattern: str) -> bool:
    return dynamic_pattern_to_regex(pattern).match(key) is not None


def match_dynamic_patterns(
    keys: set[str], patterns: set[str]
) -> tuple[set[str], dict[str, list[str]]]:
    matched: set[str] = set()
    pattern_matches: dict[str, list[str]] = {}
    for pattern in sorted(patterns):
        matches = sorted(k for k in keys if key_matches_dynamic_pattern(k, pattern))
        if matches:
            matched.update(matches)
            pattern_matches[pattern] = matches
    return matched, pattern_matches
