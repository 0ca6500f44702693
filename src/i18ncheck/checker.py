import logging
import pathlib

from i18ncheck import analyzer, catalog, extractor, walker
from i18ncheck.classes import DYNAMIC, AnalysisResult, FileScan, IgnoreRuleSet
from i18ncheck.config import AnalysisConfig
from i18ncheck.ignore import should_ignore

logger = logging.getLogger(__name__)


def scan_file(
    path: str, rules: IgnoreRuleSet, patterns: dict[str, list[str]] | None = None
) -> FileScan:
    try:
        content = pathlib.Path(path).read_text("utf-8", errors="replace")
    except OSError as ex:
        logger.warning(f"Could not read file {path}: {ex}")
        return FileScan(path, error=str(ex))

    keys, dynamic_patterns = extractor.scan_content(
        path, content, extractor.file_kind(path, patterns)
    )

    scan = FileScan(path, dynamic_patterns=dynamic_patterns)
    for key in keys:
        if key.context != DYNAMIC and should_ignore(key.key, rules):
            scan.ignored_keys.add(key.key)
            continue
        scan.keys.append(key)
        logger.debug(f"Found {key.context} key {key.key} in {key.location}")
    return scan


def run(config: AnalysisConfig) -> AnalysisResult:
    rules = IgnoreRuleSet.from_config(config)

    logger.info(f"Loading translations from {config.locales_path}...")
    translations = catalog.load_catalog(config.locales_path, rules, config.languages)

    logger.info(f"Searching for translations in {config.src_path}...")
    source_files = walker.list_source_files(
        config.src_path, config.keys_extensions, config.exclude_dirs
    )

    extracted = []
    dynamic_patterns: set[str] = set()
    source_ignored: set[str] = set()
    scan_errors = []
    for path in source_files:
        scan = scan_file(path, rules, config.patterns)
        if scan.error:
            scan_errors.append(path)
            continue
        extracted.extend(scan.keys)
        dynamic_patterns.update(scan.dynamic_patterns)
        source_ignored |= scan.ignored_keys
        for pattern in scan.dynamic_patterns:
            logger.debug(f"Found dynamic pattern {pattern} in {path}")

    logger.info(
        f"Extracted {len(extracted)} key references and {len(dynamic_patterns)} "
        f"dynamic patterns from {len(source_files)} files"
    )

    result = analyzer.reconcile(
        translations.keys,
        extracted,
        dynamic_patterns,
        rules,
        catalog_ignored=translations.ignored_keys,
        source_ignored=source_ignored,
        ignore_dynamic_keys=config.ignore_dynamic_keys,
        languages=translations.languages,
        scan_errors=scan_errors,
        config=config,
    )

    if result.has_issues:
        logger.warning(
            f"Found {len(result.unused_keys)} unused and "
            f"{len(result.missing_keys)} missing translation keys"
        )
    else:
        logger.info("All translations are properly used")
    return result
