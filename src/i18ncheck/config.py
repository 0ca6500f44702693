import dataclasses
import json
import logging
import os
import pathlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import yaml

from i18ncheck.errors import ConfigurationError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("console", "json", "csv", "xml", "html", "markdown")
OUTPUT_SECTIONS = (
    "summary",
    "dynamicPatterns",
    "ignored",
    "unused",
    "missing",
    "usedKeys",
    "translationKeys",
    "config",
)
CONFIG_FILENAMES = (
    "i18n-checker.config.yml",
    "i18n-checker.config.yaml",
    "i18n-checker.config.json",
    "translation-checker.config.json",
    "angular-translation-checker.config.json",
)
LOCALES_CANDIDATES = (
    "src/assets/i18n",
    "src/assets/locales",
    "public/i18n",
    "assets/i18n",
    "i18n",
    "locales",
)
DEFAULT_LOGGING = {
    "level": "WARNING",
    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}


def _default_patterns() -> dict[str, list[str]]:
    return {
        "typescript": ["**/*.ts", "**/*.tsx"],
        "html": ["**/*.html"],
        "javascript": ["**/*.js", "**/*.jsx"],
    }


@dataclass(frozen=True)
class AnalysisConfig:
    locales_path: str = "./src/assets/i18n"
    src_path: str = "./src"
    keys_extensions: tuple[str, ...] = (".ts", ".html")
    patterns: Mapping[str, tuple[str, ...]] = field(default_factory=_default_patterns)
    ignore_keys: tuple[str, ...] = ()
    ignore_patterns: tuple[str, ...] = ()
    ignore_regex: tuple[str, ...] = ()
    ignore_files: tuple[str, ...] = ()
    ignore_dynamic_keys: bool = False
    languages: tuple[str, ...] = ()
    exclude_dirs: tuple[str, ...] = ("node_modules", "dist", ".git", ".angular", "coverage")
    output_format: str = "console"
    output_sections: tuple[str, ...] = ("summary", "dynamicPatterns", "ignored", "unused", "missing")
    output_dir: str | None = None
    exit_on_issues: bool = False
    verbose: bool = False
    logging: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOGGING))
    config_file: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "patterns", _deep_freeze(self.patterns))
        object.__setattr__(self, "logging", _deep_freeze(self.logging))

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        changes = {name: value for name, value in overrides.items() if value is not None}
        for name in ("output_format", "output_sections"):
            if name in changes:
                _check_choices(_camel(name), changes[name])
        for name, value in changes.items():
            if isinstance(value, list):
                changes[name] = tuple(value)
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = {}
        for item in dataclasses.fields(self):
            if item.name == "config_file":
                continue
            data[_camel(item.name)] = _thaw(getattr(self, item.name))
        return data


def _deep_freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _deep_freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_deep_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _log_level(level: Any) -> int | None:
    if isinstance(level, bool):
        return None
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if isinstance(value, int):
            return value
    return None


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


STRING_FIELDS = ("localesPath", "srcPath", "outputDir", "outputFormat")
LIST_FIELDS = (
    "keysExtensions",
    "ignoreKeys",
    "ignorePatterns",
    "ignoreRegex",
    "ignoreFiles",
    "languages",
    "excludeDirs",
    "outputSections",
)
BOOL_FIELDS = ("ignoreDynamicKeys", "exitOnIssues", "verbose")
FIELDS = {_camel(f.name): f.name for f in dataclasses.fields(AnalysisConfig)}
del FIELDS["configFile"]


def _check_choices(name: str, value: Any) -> None:
    if name == "outputFormat" and value not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Invalid outputFormat '{value}'. Valid options: {', '.join(OUTPUT_FORMATS)}",
            name,
        )
    if name == "outputSections":
        for section in value:
            if section not in OUTPUT_SECTIONS:
                raise ConfigurationError(
                    f"Invalid output section '{section}'. "
                    f"Valid options: {', '.join(OUTPUT_SECTIONS)}",
                    name,
                )


def validate_config(data: Any) -> None:
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be an object")

    for name in STRING_FIELDS:
        if data.get(name) is not None and not isinstance(data[name], str):
            raise ConfigurationError(f"{name} must be a string", name)

    for name in LIST_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, list):
            raise ConfigurationError(f"{name} must be an array", name)
        if not all(isinstance(item, str) for item in value):
            raise ConfigurationError(f"All entries in {name} must be strings", name)

    for name in BOOL_FIELDS:
        if data.get(name) is not None and not isinstance(data[name], bool):
            raise ConfigurationError(f"{name} must be a boolean", name)

    for name in ("outputFormat", "outputSections"):
        if data.get(name) is not None:
            _check_choices(name, data[name])

    patterns = data.get("patterns")
    if patterns is not None:
        if not isinstance(patterns, dict):
            raise ConfigurationError("patterns must be an object", "patterns")
        for file_type, globs in patterns.items():
            if not isinstance(globs, list):
                raise ConfigurationError(f"patterns.{file_type} must be an array", "patterns")
            if not all(isinstance(glob, str) for glob in globs):
                raise ConfigurationError(
                    f"All patterns in patterns.{file_type} must be strings", "patterns"
                )

    log_config = data.get("logging")
    if log_config is not None:
        if not isinstance(log_config, dict):
            raise ConfigurationError("logging must be an object", "logging")
        level = log_config.get("level")
        if level is not None and _log_level(level) is None:
            raise ConfigurationError(f"Invalid logging level '{level}'", "logging")


def config_from_dict(data: dict[str, Any], config_file: str | None = None) -> AnalysisConfig:
    validate_config(data)
    values: dict[str, Any] = {"config_file": config_file}
    for name, value in data.items():
        if name.startswith("$"):
            continue
        if name not in FIELDS:
            logger.warning(f"Unknown configuration option '{name}' ignored")
            continue
        if value is None:
            continue
        if name == "patterns":
            value = {**_default_patterns(), **value}
        elif name == "logging":
            value = {**DEFAULT_LOGGING, **value}
        elif isinstance(value, list):
            value = tuple(value)
        values[FIELDS[name]] = value
    return AnalysisConfig(**values)


def find_config_file(base: str = ".") -> str | None:
    for filename in CONFIG_FILENAMES:
        path = os.path.join(base, filename)
        if os.path.isfile(path):
            return path
    return None


def detect_locales_path(base: str = ".") -> str | None:
    for candidate in LOCALES_CANDIDATES:
        if os.path.isdir(os.path.join(base, candidate)):
            return f"./{candidate}"
    return None


def load_config(path: str | None = None, base: str = ".") -> AnalysisConfig:
    """Load the configuration file at ``path`` or the first one found in ``base``.

    Missing options fall back to the defaults. When neither the file nor
    the defaults point at an existing locales directory, a few common
    locations are probed.
    """
    if path is None:
        path = find_config_file(base)
        if path is None:
            logger.debug("No configuration file found, using defaults")
            return _with_detected_locales(AnalysisConfig(), {}, base)
        logger.debug(f"Found configuration file: {path}")
    elif not os.path.isfile(path):
        raise ConfigurationError(f"Configuration file not found: {os.path.abspath(path)}")

    try:
        with open(path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except (OSError, yaml.YAMLError) as ex:
        raise ConfigurationError(f"Failed to load configuration from {path}: {ex}") from ex

    return _with_detected_locales(config_from_dict(data or {}, path), data or {}, base)


def _with_detected_locales(config: AnalysisConfig, data: dict, base: str) -> AnalysisConfig:
    if data.get("localesPath") or os.path.isdir(os.path.join(base, config.locales_path)):
        return config
    detected = detect_locales_path(base)
    if detected is None:
        return config
    logger.info(f"Auto-detected translation path: {detected}")
    return dataclasses.replace(config, locales_path=detected)


def generate_config(path: str, base: str = ".") -> dict[str, Any]:
    data = AnalysisConfig().to_dict()
    detected = detect_locales_path(base)
    if detected:
        data["localesPath"] = detected

    target = pathlib.Path(path)
    if target.suffix in (".yml", ".yaml"):
        content = yaml.safe_dump(data, sort_keys=False)
    else:
        content = json.dumps(data, indent=2) + "\n"
    try:
        target.write_text(content, "utf-8")
    except OSError as ex:
        raise ConfigurationError(f"Failed to generate configuration file: {ex}") from ex
    return data


def configure_logging(config: AnalysisConfig) -> None:
    log_config = {**DEFAULT_LOGGING, **config.logging}
    level = logging.DEBUG if config.verbose else _log_level(log_config["level"])
    logging.basicConfig(
        level=level if level is not None else logging.WARNING,
        format=log_config["format"],
        datefmt=log_config["datefmt"],
    )
