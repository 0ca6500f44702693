import logging

from i18ncheck.classes import IgnoreRuleSet
from i18ncheck.ignore import (
    ignore_reason,
    partition_ignored,
    should_ignore,
    should_ignore_file,
)

RULES = IgnoreRuleSet(
    exact_keys=frozenset({"app.title", "debug.exact"}),
    wildcard_patterns=("debug.*", "temp.**"),
    regex_patterns=(r"^test\.",),
)


def test_rule_types():
    assert should_ignore("app.title", RULES)
    assert should_ignore("debug.api", RULES)
    assert should_ignore("temp.a.b.c", RULES)
    assert should_ignore("test.anything.here", RULES)
    assert not should_ignore("debug.api.request", RULES)
    assert not should_ignore("home.title", RULES)


def test_exact_match_wins_over_patterns():
    assert ignore_reason("debug.exact", RULES) == ("exact", "debug.exact")
    assert ignore_reason("debug.api", RULES) == ("pattern", "debug.*")
    assert ignore_reason("test.x", RULES) == ("regex", r"^test\.")
    assert ignore_reason("home.title", RULES) is None


def test_wildcard_patterns_keep_configured_order():
    rules = IgnoreRuleSet(wildcard_patterns=("a.**", "a.*"))
    assert ignore_reason("a.b", rules) == ("pattern", "a.**")


def test_invalid_regex_is_skipped(caplog):
    caplog.set_level(logging.WARNING)
    rules = IgnoreRuleSet(regex_patterns=("[unclosed-in-ignore-test", "^ok"))
    assert should_ignore("ok.key", rules)
    assert not should_ignore("other.key", rules)
    assert "Invalid regex pattern" in caplog.text


def test_should_ignore_file():
    rules = IgnoreRuleSet(ignore_files=frozenset({"legacy.json"}))
    assert should_ignore_file("legacy.json", rules)
    assert not should_ignore_file("en.json", rules)


def test_partition_ignored():
    kept, ignored = partition_ignored(["app.title", "home.title", "debug.api"], RULES)
    assert kept == {"home.title"}
    assert ignored == {"app.title", "debug.api"}


def test_empty_rule_set_is_falsy():
    assert not IgnoreRuleSet()
    assert RULES
