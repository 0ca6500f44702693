import functools
import logging
import re
from collections.abc import Iterable

from i18ncheck.classes import IgnoreRuleSet
from i18ncheck.patterns import matches_wildcard

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=256)
def _compile_regex(pattern: str) -> re.Pattern | None:
    try:
        return re.compile(pattern)
    except re.error as ex:
        logger.warning(f'Invalid regex pattern "{pattern}": {ex}')
        return None


def ignore_reason(key: str, rules: IgnoreRuleSet) -> tuple[str, str] | None:
    """Return ``(rule_type, rule)`` for the first rule ignoring ``key``.

    Rules are checked in order: exact keys, wildcard patterns, then regular
    expressions. Invalid regular expressions are skipped.
    """
    if key in rules.exact_keys:
        return "exact", key

    for pattern in rules.wildcard_patterns:
        if matches_wildcard(key, pattern):
            return "pattern", pattern

    for pattern in rules.regex_patterns:
        regex = _compile_regex(pattern)
        if regex is not None and regex.search(key):
            return "regex", pattern

    return None


def should_ignore(key: str, rules: IgnoreRuleSet) -> bool:
    reason = ignore_reason(key, rules)
    if reason is None:
        return False
    logger.debug(f"Ignoring key ({reason[0]} {reason[1]!r}): {key}")
    return True


def should_ignore_file(filename: str, rules: IgnoreRuleSet) -> bool:
    if filename in rules.ignore_files:
        logger.debug(f"Ignoring translation file: {filename}")
        return True
    return False


def partition_ignored(
    keys: Iterable[str], rules: IgnoreRuleSet
) -> tuple[set[str], set[str]]:
    kept: set[str] = set()
    ignored: set[str] = set()
    for key in keys:
        if should_ignore(key, rules):
            ignored.add(key)
        else:
            kept.add(key)
    return kept, ignored
