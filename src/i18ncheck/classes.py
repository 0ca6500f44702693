from dataclasses import dataclass, field
from typing import Any

STATIC = "static"
STANDALONE = "standalone"
CONSTANT = "constant"
DYNAMIC = "dynamic"


@dataclass(frozen=True)
class TranslationKey:
    key: str
    file: str
    line: int
    column: int | None = None
    context: str = STATIC

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass
class TranslationFile:
    language: str
    path: str
    keys: dict[str, Any]
    error: str | None = None


@dataclass
class DynamicPattern:
    pattern: str
    matches: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class IgnoreRuleSet:
    exact_keys: frozenset[str] = frozenset()
    wildcard_patterns: tuple[str, ...] = ()
    regex_patterns: tuple[str, ...] = ()
    ignore_files: frozenset[str] = frozenset()

    @classmethod
    def from_config(cls, config) -> "IgnoreRuleSet":
        return cls(
            exact_keys=frozenset(config.ignore_keys),
            wildcard_patterns=tuple(config.ignore_patterns),
            regex_patterns=tuple(config.ignore_regex),
            ignore_files=frozenset(config.ignore_files),
        )

    def __bool__(self) -> bool:
        return bool(self.exact_keys or self.wildcard_patterns or self.regex_patterns)


@dataclass
class FileScan:
    path: str
    keys: list[TranslationKey] = field(default_factory=list)
    dynamic_patterns: list[str] = field(default_factory=list)
    ignored_keys: set[str] = field(default_factory=set)
    error: str | None = None


@dataclass
class Catalog:
    files: list[TranslationFile]
    languages: dict[str, set[str]]
    ignored_keys: set[str] = field(default_factory=set)

    @property
    def keys(self) -> set[str]:
        keys: set[str] = set()
        for language_keys in self.languages.values():
            keys |= language_keys
        return keys


@dataclass(frozen=True)
class AnalysisResult:
    total_keys: int
    used_keys_count: int
    dynamic_matched_keys_count: int
    ignored_keys_count: int
    unused_keys: list[str]
    missing_keys: list[str]
    ignored_keys: list[str]
    translation_keys: list[str]
    used_keys: list[str]
    dynamic_matched_keys: list[str]
    dynamic_patterns: list[str]
    pattern_matches: dict[str, list[str]]
    languages: list[str] = field(default_factory=list)
    key_locations: dict[str, list[TranslationKey]] = field(default_factory=dict)
    scan_errors: list[str] = field(default_factory=list)
    config: Any = None

    @property
    def coverage(self) -> int:
        if self.total_keys == 0:
            return 0
        # Round half up
        return int(self.used_keys_count * 100 / self.total_keys + 0.5)

    @property
    def has_issues(self) -> bool:
        return bool(self.unused_keys or self.missing_keys)

    def pattern_details(self) -> list[DynamicPattern]:
        return [
            DynamicPattern(pattern, list(self.pattern_matches.get(pattern, [])))
            for pattern in self.dynamic_patterns
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalKeys": self.total_keys,
            "usedKeysCount": self.used_keys_count,
            "dynamicMatchedKeysCount": self.dynamic_matched_keys_count,
            "ignoredKeysCount": self.ignored_keys_count,
            "coverage": self.coverage,
            "languages": self.languages,
            "unusedKeys": self.unused_keys,
            "missingKeys": self.missing_keys,
            "ignoredKeys": self.ignored_keys,
            "translationKeys": self.translation_keys,
            "usedKeys": self.used_keys,
            "dynamicMatchedKeys": self.dynamic_matched_keys,
            "dynamicPatterns": self.dynamic_patterns,
            "patternMatches": self.pattern_matches,
        }
