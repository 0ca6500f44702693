import logging
from collections import defaultdict
from collections.abc import Iterable

from i18ncheck.classes import DYNAMIC, AnalysisResult, IgnoreRuleSet, TranslationKey
from i18ncheck.ignore import partition_ignored
from i18ncheck.patterns import match_dynamic_patterns

logger = logging.getLogger(__name__)


def reconcile(
    catalog_keys: Iterable[str],
    extracted: Iterable[TranslationKey],
    dynamic_patterns: Iterable[str],
    rules: IgnoreRuleSet,
    *,
    catalog_ignored: Iterable[str] = (),
    source_ignored: Iterable[str] = (),
    ignore_dynamic_keys: bool = False,
    languages: Iterable[str] = (),
    scan_errors: Iterable[str] = (),
    config=None,
) -> AnalysisResult:
    """Partition catalog and code keys into used, unused, missing and ignored.

    ``catalog_keys`` must already be ignore-filtered, as
    :func:`i18ncheck.catalog.load_catalog` returns them: ``total_keys`` and
    coverage are computed from it as given. Ignored keys still passed in
    are moved to the ignored set but counted in ``total_keys``.

    ``catalog_ignored`` and ``source_ignored`` are keys already dropped by
    an ignore rule while loading catalogs and scanning sources. They are
    merged into the ignored set; the ignored count is taken after the union
    so a key matched by several rules is counted once.
    """
    catalog = set(catalog_keys)
    extracted = list(extracted)

    static_keys = [k for k in extracted if k.context != DYNAMIC]
    static_used = {k.key for k in static_keys}

    key_locations: dict[str, list[TranslationKey]] = defaultdict(list)
    for occurrence in static_keys:
        key_locations[occurrence.key].append(occurrence)

    catalog_kept, ignored_catalog = partition_ignored(catalog, rules)
    _, ignored_used = partition_ignored(static_used, rules)

    patterns = set(dynamic_patterns)
    if ignore_dynamic_keys:
        dynamic_matched, pattern_matches = set(), {}
    else:
        dynamic_matched, pattern_matches = match_dynamic_patterns(catalog_kept, patterns)

    ignored = set(catalog_ignored) | ignored_catalog | ignored_used | set(source_ignored)

    all_used = static_used | dynamic_matched
    unused = catalog - all_used - ignored
    missing = static_used - catalog - ignored
    used = all_used - ignored

    logger.debug(
        f"Reconciled {len(catalog)} catalog keys: {len(used)} used, "
        f"{len(unused)} unused, {len(missing)} missing, {len(ignored)} ignored"
    )

    return AnalysisResult(
        total_keys=len(catalog),
        used_keys_count=len(static_used) - len(ignored_used),
        dynamic_matched_keys_count=len(dynamic_matched),
        ignored_keys_count=len(ignored),
        unused_keys=sorted(unused),
        missing_keys=sorted(missing),
        ignored_keys=sorted(ignored),
        translation_keys=sorted(catalog),
        used_keys=sorted(used),
        dynamic_matched_keys=sorted(dynamic_matched),
        dynamic_patterns=sorted(patterns),
        pattern_matches=pattern_matches,
        languages=sorted(languages),
        key_locations={key: key_locations[key] for key in sorted(key_locations)},
        scan_errors=sorted(scan_errors),
        config=config,
    )
