"""Render an :class:`AnalysisResult` as text.

Formatters only select and lay out data that is already in the result; they
never compute anything new beyond grouping for display.
"""
import csv
import html
import io
import json
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from i18ncheck.classes import AnalysisResult, IgnoreRuleSet
from i18ncheck.errors import TranslationCheckerError
from i18ncheck.ignore import ignore_reason

TOOL_NAME = "i18n-check"
DEFAULT_SECTIONS = ("summary", "dynamicPatterns", "ignored", "unused", "missing")
LIST_LIMIT = 50


def summary(result: AnalysisResult) -> dict:
    return {
        "languages": result.languages,
        "totalKeys": result.total_keys,
        "usedKeysCount": result.used_keys_count,
        "dynamicMatchedKeysCount": result.dynamic_matched_keys_count,
        "ignoredKeysCount": result.ignored_keys_count,
        "unusedKeysCount": len(result.unused_keys),
        "missingKeysCount": len(result.missing_keys),
        "coverage": result.coverage,
    }


def _locations(result: AnalysisResult, key: str) -> list[str]:
    return [occurrence.location for occurrence in result.key_locations.get(key, [])]


def _group_ignored(result: AnalysisResult) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    rules = IgnoreRuleSet.from_config(result.config) if result.config else IgnoreRuleSet()
    for key in result.ignored_keys:
        reason = ignore_reason(key, rules)
        label = f'{reason[0]} "{reason[1]}"' if reason else "other"
        groups.setdefault(label, []).append(key)
    return groups


def _limited(items: list[str], limit: int, indent: str = "  ") -> list[str]:
    lines = [f"{indent}- {item}" for item in items[:limit]]
    if len(items) > limit:
        lines.append(f"{indent}... and {len(items) - limit} more")
    return lines


def format_console(result: AnalysisResult, sections) -> str:
    verbose = bool(result.config and result.config.verbose)
    limit = len(result.translation_keys) + len(result.missing_keys) if verbose else LIST_LIMIT
    output: list[str] = []

    for section in sections:
        if section == "summary":
            output.append("Translation Summary")
            output.append("-" * 20)
            output.append(f"Languages: {', '.join(result.languages) or 'none'}")
            output.append(f"Total translation keys: {result.total_keys}")
            output.append(f"Used keys (static): {result.used_keys_count}")
            if result.dynamic_matched_keys_count:
                output.append(
                    f"Used keys (dynamic patterns): {result.dynamic_matched_keys_count}"
                )
            if result.ignored_keys_count:
                output.append(f"Ignored keys: {result.ignored_keys_count}")
            output.append(f"Unused keys: {len(result.unused_keys)}")
            output.append(f"Missing keys: {len(result.missing_keys)}")
            output.append(f"Coverage: {result.coverage}%")
            if result.scan_errors:
                output.append(f"Files that could not be scanned: {len(result.scan_errors)}")
            output.append("")
        elif section == "dynamicPatterns" and result.dynamic_patterns:
            output.append(f"Dynamic Patterns ({len(result.dynamic_patterns)})")
            output.append("-" * 30)
            for pattern in result.pattern_details():
                output.append(f'"{pattern.pattern}": {len(pattern.matches)} key(s)')
                output.extend(_limited(pattern.matches, 10 if not verbose else limit))
            output.append("")
        elif section == "ignored" and result.ignored_keys:
            output.append(f"Ignored Translation Keys ({len(result.ignored_keys)})")
            output.append("-" * 35)
            for label, keys in _group_ignored(result).items():
                output.append(f"{label}: {len(keys)} key(s)")
                output.extend(_limited(keys, 20 if not verbose else limit))
            output.append("")
        elif section == "unused":
            if result.unused_keys:
                output.append(f"Unused Translation Keys ({len(result.unused_keys)})")
                output.append("-" * 35)
                output.extend(_limited(result.unused_keys, limit, ""))
            else:
                output.append("No unused translation keys found!")
            output.append("")
        elif section == "missing":
            if result.missing_keys:
                output.append(f"Missing Translation Keys ({len(result.missing_keys)})")
                output.append("-" * 35)
                missing = []
                for key in result.missing_keys:
                    locations = _locations(result, key)
                    missing.append(f"{key} ({locations[0]})" if locations else key)
                output.extend(_limited(missing, limit, ""))
            else:
                output.append("No missing translation keys found!")
            output.append("")
        elif section == "usedKeys":
            output.append(f"Used Translation Keys ({len(result.used_keys)})")
            output.append("-" * 30)
            output.extend(_limited(result.used_keys, limit, ""))
            output.append("")
        elif section == "translationKeys":
            output.append(f"Available Translation Keys ({len(result.translation_keys)})")
            output.append("-" * 45)
            output.extend(_limited(result.translation_keys, limit, ""))
            output.append("")
        elif section == "config" and result.config:
            config = result.config
            output.append("Configuration")
            output.append("-" * 15)
            output.append(f"Source path: {config.src_path}")
            output.append(f"Locales path: {config.locales_path}")
            output.append(f"Output format: {config.output_format}")
            output.append(f"Output sections: {', '.join(config.output_sections)}")
            output.append(f"Ignore keys: {', '.join(config.ignore_keys) or 'none'}")
            output.append(f"Ignore patterns: {', '.join(config.ignore_patterns) or 'none'}")
            output.append(f"Ignore regex: {', '.join(config.ignore_regex) or 'none'}")
            output.append(f"Ignore dynamic keys: {'yes' if config.ignore_dynamic_keys else 'no'}")
            output.append(f"Exclude directories: {', '.join(config.exclude_dirs)}")
            output.append("")

    if "summary" in sections and not result.has_issues:
        output.append("All translations are properly used!")
    return "\n".join(output).rstrip("\n") + "\n"


def _sections_dict(result: AnalysisResult, sections) -> dict:
    analysis: dict = {}
    if "dynamicPatterns" in sections:
        analysis["dynamicPatterns"] = [
            {"pattern": p.pattern, "matches": p.matches} for p in result.pattern_details()
        ]
        analysis["dynamicMatchedKeys"] = result.dynamic_matched_keys
    if "ignored" in sections:
        analysis["ignoredKeys"] = result.ignored_keys
    if "unused" in sections:
        analysis["unusedKeys"] = result.unused_keys
    if "missing" in sections:
        analysis["missingKeys"] = [
            {"key": key, "locations": _locations(result, key)} for key in result.missing_keys
        ]
    if "usedKeys" in sections:
        analysis["usedKeys"] = result.used_keys
    if "translationKeys" in sections:
        analysis["translationKeys"] = result.translation_keys
    if "config" in sections and result.config:
        analysis["configuration"] = result.config.to_dict()
    return analysis


def format_json(result: AnalysisResult, sections) -> str:
    report = {
        "metadata": {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "tool": TOOL_NAME,
            "srcPath": result.config.src_path if result.config else None,
            "localesPath": result.config.locales_path if result.config else None,
        },
    }
    if "summary" in sections:
        report["summary"] = summary(result)
    report["analysis"] = _sections_dict(result, sections)
    return json.dumps(report, indent=2)


def format_csv(result: AnalysisResult, sections) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Type", "Key", "Location"])
    if "unused" in sections:
        for key in result.unused_keys:
            writer.writerow(["unused", key, ""])
    if "missing" in sections:
        for key in result.missing_keys:
            writer.writerow(["missing", key, ";".join(_locations(result, key))])
    if "ignored" in sections:
        for key in result.ignored_keys:
            writer.writerow(["ignored", key, ""])
    if "dynamicPatterns" in sections:
        for key in result.dynamic_matched_keys:
            writer.writerow(["dynamic", key, ""])
    if "usedKeys" in sections:
        for key in result.used_keys:
            writer.writerow(["used", key, ";".join(_locations(result, key))])
    return buffer.getvalue()


def format_xml(result: AnalysisResult, sections) -> str:
    root = ET.Element("translationAnalysis", tool=TOOL_NAME)
    if "summary" in sections:
        attributes = {
            name: str(value)
            for name, value in summary(result).items()
            if not isinstance(value, list)
        }
        ET.SubElement(root, "summary", attributes)
    for name, value in _sections_dict(result, sections).items():
        element = ET.SubElement(root, name)
        if isinstance(value, dict):
            for option, setting in value.items():
                ET.SubElement(element, "option", name=option).text = json.dumps(setting)
            continue
        for item in value:
            if isinstance(item, str):
                ET.SubElement(element, "key").text = item
            elif "pattern" in item:
                pattern = ET.SubElement(element, "pattern", value=item["pattern"])
                for match in item["matches"]:
                    ET.SubElement(pattern, "key").text = match
            else:
                key = ET.SubElement(element, "key", value=item["key"])
                for location in item["locations"]:
                    ET.SubElement(key, "location").text = location
    ET.indent(root)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode") + "\n"


def _html_list(title: str, items: list[str]) -> str:
    rows = "".join(f"<li><code>{html.escape(item)}</code></li>" for item in items)
    return f"<section><h2>{html.escape(title)} ({len(items)})</h2><ul>{rows}</ul></section>\n"


def format_html(result: AnalysisResult, sections) -> str:
    body = "<h1>Translation Analysis</h1>\n"
    if "summary" in sections:
        rows = "".join(
            f"<tr><th>{html.escape(name)}</th><td>{html.escape(str(value))}</td></tr>"
            for name, value in summary(result).items()
        )
        body += f"<section><h2>Summary</h2><table>{rows}</table></section>\n"
    if "dynamicPatterns" in sections:
        for pattern in result.pattern_details():
            body += _html_list(f"Pattern {pattern.pattern}", pattern.matches)
    if "ignored" in sections:
        body += _html_list("Ignored keys", result.ignored_keys)
    if "unused" in sections:
        body += _html_list("Unused keys", result.unused_keys)
    if "missing" in sections:
        missing = [
            f"{key} ({', '.join(_locations(result, key))})" if _locations(result, key) else key
            for key in result.missing_keys
        ]
        body += _html_list("Missing keys", missing)
    if "usedKeys" in sections:
        body += _html_list("Used keys", result.used_keys)
    if "translationKeys" in sections:
        body += _html_list("Translation keys", result.translation_keys)
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"UTF-8\">\n"
        "<title>Translation Analysis Report</title>\n</head>\n<body>\n"
        + body
        + "</body>\n</html>\n"
    )


def format_markdown(result: AnalysisResult, sections) -> str:
    markdown = "# Translation Analysis\n\n"
    if "summary" in sections:
        markdown += "| Metric | Value |\n| ------- | --------- |\n"
        for name, value in summary(result).items():
            if isinstance(value, list):
                value = ", ".join(value)
            markdown += f"| {name} | {value} |\n"
        markdown += "\n"

    issues = []
    if "unused" in sections:
        issues += [(key, "Unused in code") for key in result.unused_keys]
    if "missing" in sections:
        for key in result.missing_keys:
            issue = "Missing from catalog"
            locations = ", ".join(_locations(result, key))
            if locations:
                issue += f" ({locations})"
            issues.append((key, issue))
    if issues:
        markdown += "## Issues\n| Key | Issue |\n| ------- | --------- |\n"
        for key, issue in issues:
            markdown += f"| `{key}` | {issue} |\n"
        markdown += "\n"
    elif "summary" in sections:
        markdown += "No issues found\n\n"

    if "dynamicPatterns" in sections and result.dynamic_patterns:
        markdown += "## Dynamic patterns\n"
        for pattern in result.pattern_details():
            markdown += f"- `{pattern.pattern}`: {len(pattern.matches)} key(s)\n"
        markdown += "\n"
    if "ignored" in sections and result.ignored_keys:
        markdown += "## Ignored keys\n"
        markdown += "".join(f"- `{key}`\n" for key in result.ignored_keys)
        markdown += "\n"
    return markdown


FORMATTERS = {
    "console": format_console,
    "json": format_json,
    "csv": format_csv,
    "xml": format_xml,
    "html": format_html,
    "markdown": format_markdown,
}

EXTENSIONS = {
    "console": "txt",
    "json": "json",
    "csv": "csv",
    "xml": "xml",
    "html": "html",
    "markdown": "md",
}


def format_result(result: AnalysisResult, output_format: str = "console", sections=DEFAULT_SECTIONS) -> str:
    formatter = FORMATTERS.get(output_format)
    if formatter is None:
        raise TranslationCheckerError(
            f"No formatter found for format '{output_format}'", "FORMATTER_NOT_FOUND"
        )
    return formatter(result, tuple(sections))
