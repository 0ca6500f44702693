import json
import logging
import pathlib
from collections.abc import Iterable
from typing import Any

from i18ncheck.classes import Catalog, IgnoreRuleSet, TranslationFile
from i18ncheck.errors import DiscoveryError
from i18ncheck.ignore import partition_ignored, should_ignore_file

logger = logging.getLogger(__name__)


def flatten_keys(tree: dict[str, Any], prefix: str = "") -> list[str]:
    """Join nested object keys with dots down to the leaf values.

    Lists and ``None`` are leaves.
    """
    keys = []
    for name, value in tree.items():
        full_key = f"{prefix}.{name}" if prefix else str(name)
        if isinstance(value, dict):
            keys.extend(flatten_keys(value, full_key))
        else:
            keys.append(full_key)
    return keys


def parse_translation_files(path: str, rules: IgnoreRuleSet) -> list[TranslationFile]:
    directory = pathlib.Path(path)
    try:
        entries = sorted(directory.iterdir())
    except OSError as ex:
        raise DiscoveryError(f"Could not read locales directory {path}: {ex}", path) from ex

    units = []
    for file in entries:
        if file.suffix != ".json" or not file.is_file():
            continue
        if should_ignore_file(file.name, rules):
            continue

        logger.debug(f"Parsing {file}")
        try:
            content = json.loads(file.read_text("utf-8"))
        except (OSError, ValueError) as ex:
            logger.warning(f"Could not parse {file.name}: {ex}")
            units.append(TranslationFile(file.stem, str(file), {}, str(ex)))
            continue

        if not isinstance(content, dict):
            logger.warning(f"File {file.name} does not contain a JSON object")
            units.append(TranslationFile(file.stem, str(file), {}, "not a JSON object"))
            continue

        units.append(TranslationFile(file.stem, str(file), content))
    return units


def load_catalog(
    path: str, rules: IgnoreRuleSet, languages: Iterable[str] = ()
) -> Catalog:
    wanted = set(languages)
    files = [
        f
        for f in parse_translation_files(path, rules)
        if not wanted or f.language in wanted
    ]
    if not files:
        logger.warning(f"No translation files found in {path}")

    catalog = Catalog(files=files, languages={})
    for file in files:
        if file.error:
            continue
        kept, ignored = partition_ignored(flatten_keys(file.keys), rules)
        catalog.languages.setdefault(file.language, set()).update(kept)
        catalog.ignored_keys |= ignored
        logger.debug(f"Processed {file.language}: {len(kept)} keys, {len(ignored)} ignored")

    logger.info(f"Available languages: {len(catalog.languages)}")
    return catalog
