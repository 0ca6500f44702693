"""Text based extraction of translation keys from source files.

Nothing here parses the source language. Every strategy is a regular
expression over the raw text, plus a small bracket/quote aware scanner used
to isolate call arguments and split concatenations. This is a heuristic:
keys built in ways the patterns do not recognise are missed, and string
literals that only look like keys may be reported.
"""
import bisect
import logging
import re
from pathlib import PurePath

from i18ncheck.classes import CONSTANT, DYNAMIC, STANDALONE, STATIC, TranslationKey

logger = logging.getLogger(__name__)

HTML = "html"
SCRIPT = "script"

KNOWN_SERVICES = (
    "translate",
    "translateService",
    "translationService",
    "i18nService",
    "i18n",
)
_METHODS = r"(?:get|instant|stream|translate)"
_QUOTED = r"(?P<quote>['\"`])(?P<key>[^'\"`\n]+?)(?P=quote)"

_PIPE = re.compile(_QUOTED + r"\s*\|\s*translate\b")
_KNOWN_SERVICE_CALL = re.compile(
    r"\b(?:" + "|".join(KNOWN_SERVICES) + r")\." + _METHODS + r"\(\s*"
    + _QUOTED + r"\s*[,)]"
)
_ANY_SERVICE_CALL = re.compile(r"\b\w+\." + _METHODS + r"\(\s*" + _QUOTED + r"\s*[,)]")
_DIRECTIVE_BINDING = re.compile(
    r"\[translate\]\s*=\s*(?P<outer>[\"'])(?P<quote>['`])(?P<key>[^'\"`\n]+?)(?P=quote)(?P=outer)"
)
_DIRECTIVE_ATTRIBUTE = re.compile(
    r"(?<![\w\[.-])translate\s*=\s*(?P<quote>[\"'])(?P<key>[^'\"{}\n]+?)(?P=quote)"
)

_STANDALONE = re.compile(
    r"(?P<quote>['\"`])(?P<key>[A-Z][A-Z0-9_]*(?:\.[A-Z][A-Z0-9_]*)+)(?P=quote)"
)

_DECLARATION = (
    r"(?:\b(?:const|let|var|readonly|static)\s+"
    r"|\b(?:public|private|protected)\s+(?:(?:readonly|static)\s+)*"
    # class member with a type annotation: `label: string = ...`
    r"|^[ \t]*(?=\w+\s*:))"
    r"\w+\s*(?::[^=;{}\n]+)?=\s*"
)
_OBJECT_OPEN = re.compile(_DECLARATION + r"\{", re.M)
_ENUM_OPEN = re.compile(r"\benum\s+\w+\s*\{")
_SIMPLE_CONSTANT = re.compile(_DECLARATION + _QUOTED, re.M)
_STRING_LITERAL = re.compile(_QUOTED)

_CALL_OPEN = re.compile(r"\b(?P<service>\w+)\." + _METHODS + r"\(")
_TEMPLATE_PIPE = re.compile(r"`(?P<body>[^`]*\$\{[^`]*)`\s*\|\s*translate\b")
_CONCAT_PIPES = (
    re.compile(r"\{\{\s*(?P<expr>[^{}|]*?\+[^{}|]*?)\s*\|\s*translate\b"),
    re.compile(r"\(\s*(?P<expr>[^()|]*?\+[^()|]*?)\s*\)\s*\|\s*translate\b"),
    re.compile(r"=\s*\"(?P<expr>[^\"|]*?\+[^\"|]*?)\s*\|\s*translate\b"),
)
_HOLE = re.compile(r"\$\{[^}]*\}")
_STAR_RUN = re.compile(r"\*+")

_KEY_SHAPE = re.compile(r"^[A-Za-z_$][\w$-]*(?:\.[\w$-]+)+$")
_CONSTANT_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")
_PATTERN_SHAPE = re.compile(r"^[\w.*$-]+$")
_MAX_ARGUMENT_LENGTH = 2000


def file_kind(file_path: str, patterns: dict[str, list[str]] | None = None) -> str:
    """Pick the extraction flavour for ``file_path``.

    ``patterns`` maps a file type (``html``, ``typescript``, ``javascript``)
    to glob patterns; the first type whose globs match wins. Without a match
    the file suffix decides.
    """
    path = PurePath(file_path)
    for file_type, globs in (patterns or {}).items():
        for glob in globs:
            if path.match(glob) or path.match(glob.removeprefix("**/")):
                return HTML if file_type == HTML else SCRIPT
    return HTML if path.suffix.lower() in (".html", ".htm") else SCRIPT


def is_key_shaped(value: str) -> bool:
    return _KEY_SHAPE.match(value) is not None


def is_service_key(value: str) -> bool:
    """Keys accepted from calls on receivers that are not known services."""
    return is_key_shaped(value) or _CONSTANT_NAME.match(value) is not None


def _top_level(text: str, start: int = 0, limit: int | None = None):
    """Yield ``(index, char)`` for characters outside strings and brackets.

    Unbalanced closing brackets are yielded as well so callers can detect
    the end of an argument list.
    """
    end = len(text) if limit is None else min(len(text), start + limit)
    depth = 0
    quote = None
    i = start
    while i < end:
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"`":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            if depth == 0:
                yield i, char
            else:
                depth -= 1
        elif depth == 0:
            yield i, char
        i += 1


def _first_argument(content: str, start: int) -> str | None:
    for index, char in _top_level(content, start, _MAX_ARGUMENT_LENGTH):
        if char in ",)":
            return content[start:index]
        if char in "]}":
            return None
    return None


def _block_body(content: str, start: int) -> str | None:
    for index, char in _top_level(content, start):
        if char in ")]}":
            return content[start:index] if char == "}" else None
    return None


def _split_concatenation(expr: str) -> list[str]:
    parts = []
    last = 0
    for index, char in _top_level(expr):
        if char == "+":
            parts.append(expr[last:index])
            last = index + 1
    parts.append(expr[last:])
    return [part.strip() for part in parts]


def _literal_value(part: str) -> str | None:
    if len(part) < 2 or part[0] != part[-1]:
        return None
    if part[0] in "'\"" and part[0] not in part[1:-1]:
        return part[1:-1]
    if part[0] == "`":
        return _HOLE.sub("*", part[1:-1])
    return None


def fold_expression(expr: str) -> str | None:
    """Fold a key expression into a key shape with ``*`` holes.

    ``'a.' + type + '.b'`` becomes ``a.*.b`` and ```a.${x}``` becomes
    ``a.*``. A bare expression without any string literal gives ``None``.
    """
    parts = _split_concatenation(expr.strip())
    folded = []
    has_literal = False
    for part in parts:
        if not part:
            return None
        value = _literal_value(part)
        if value is None:
            folded.append("*")
        else:
            has_literal = True
            folded.append(value)
    if not has_literal:
        return None
    return _STAR_RUN.sub("*", "".join(folded)).strip()


def is_valid_pattern(pattern: str) -> bool:
    if pattern == "*" or len(pattern) <= 1:
        return False
    return _PATTERN_SHAPE.match(pattern) is not None


def _next_char(content: str, index: int) -> str:
    while index < len(content) and content[index].isspace():
        index += 1
    return content[index] if index < len(content) else ""


def _previous_char(content: str, index: int) -> str:
    index -= 1
    while index >= 0 and content[index].isspace():
        index -= 1
    return content[index] if index >= 0 else ""


def _in_concatenation(content: str, start: int, end: int) -> bool:
    return _previous_char(content, start) == "+" or _next_char(content, end) == "+"


class _Scan:
    def __init__(self, file_path: str, content: str, kind: str) -> None:
        self.file_path = file_path
        self.content = content
        self.kind = kind
        self.line_starts = [0] + [m.end() for m in re.finditer("\n", content)]
        self.keys: list[TranslationKey] = []
        self.patterns: list[str] = []
        self.seen: set[int] = set()

    def add(self, key: str, index: int, context: str) -> None:
        key = key.strip()
        if not key or index in self.seen:
            return
        self.seen.add(index)
        line = bisect.bisect_right(self.line_starts, index)
        column = index - self.line_starts[line - 1] + 1
        self.keys.append(TranslationKey(key, self.file_path, line, column, context))

    def add_pattern(self, pattern: str, index: int) -> None:
        if pattern not in self.patterns:
            self.patterns.append(pattern)
        self.add(pattern, index, DYNAMIC)

    def literal_calls(self) -> None:
        content = self.content
        for match in _PIPE.finditer(content):
            if "${" in match.group("key"):
                continue
            if _previous_char(content, match.start()) == "+":
                continue
            self.add(match.group("key"), match.start("key"), STATIC)

        for match in _KNOWN_SERVICE_CALL.finditer(content):
            if "${" not in match.group("key"):
                self.add(match.group("key"), match.start("key"), STATIC)

        for match in _ANY_SERVICE_CALL.finditer(content):
            key = match.group("key").strip()
            if is_service_key(key):
                self.add(key, match.start("key"), STATIC)

        if self.kind == HTML:
            for regex in (_DIRECTIVE_BINDING, _DIRECTIVE_ATTRIBUTE):
                for match in regex.finditer(content):
                    self.add(match.group("key"), match.start("key"), STATIC)

    def standalone_keys(self) -> None:
        for match in _STANDALONE.finditer(self.content):
            if _in_concatenation(self.content, match.start(), match.end()):
                continue
            self.add(match.group("key"), match.start("key"), STANDALONE)

    def constants(self) -> None:
        content = self.content
        for regex in (_OBJECT_OPEN, _ENUM_OPEN):
            for block in regex.finditer(content):
                body = _block_body(content, block.end())
                if body is None:
                    continue
                for match in _STRING_LITERAL.finditer(body):
                    key = match.group("key").strip()
                    if is_key_shaped(key):
                        self.add(key, block.end() + match.start("key"), CONSTANT)

        for match in _SIMPLE_CONSTANT.finditer(content):
            key = match.group("key").strip()
            if not is_key_shaped(key) or _next_char(content, match.end()) == "+":
                continue
            self.add(key, match.start("key"), CONSTANT)

    def call_arguments(self) -> None:
        content = self.content
        for match in _CALL_OPEN.finditer(content):
            argument = _first_argument(content, match.end())
            if argument is None:
                continue
            known = match.group("service") in KNOWN_SERVICES
            index = match.end() + len(argument) - len(argument.lstrip())
            stripped = argument.strip()
            if stripped.startswith("[") and stripped.endswith("]"):
                # translate.get(['a.b', 'a.c'])
                self._array_keys(stripped, index, known)
            else:
                self._fold(argument, index, known)

    def _array_keys(self, text: str, offset: int, known: bool) -> None:
        for match in _STRING_LITERAL.finditer(text):
            key = match.group("key").strip()
            if "${" in key:
                continue
            if known or is_service_key(key):
                self.add(key, offset + match.start("key"), STATIC)

    def dynamic_pipes(self) -> None:
        for match in _TEMPLATE_PIPE.finditer(self.content):
            pattern = _STAR_RUN.sub("*", _HOLE.sub("*", match.group("body"))).strip()
            if is_valid_pattern(pattern):
                self.add_pattern(pattern, match.start())

        for regex in _CONCAT_PIPES:
            for match in regex.finditer(self.content):
                self._fold(match.group("expr"), match.start("expr"), True)

    def _fold(self, expr: str, index: int, known: bool) -> None:
        parts = _split_concatenation(expr.strip())
        if len(parts) == 1 and "${" not in parts[0]:
            # Plain literals are handled by literal_calls
            return
        folded = fold_expression(expr)
        if not folded:
            return
        if "*" not in folded:
            if known or is_key_shaped(folded):
                self.add(folded, index, STATIC)
            return
        if not known and "." not in folded:
            return
        if is_valid_pattern(folded):
            self.add_pattern(folded, index)

    def run(self) -> None:
        self.literal_calls()
        self.call_arguments()
        self.dynamic_pipes()
        self.standalone_keys()
        self.constants()
        self.keys.sort(key=lambda k: (k.line, k.column or 0))


def scan_content(
    file_path: str, content: str, kind: str | None = None
) -> tuple[list[TranslationKey], list[str]]:
    """Extract key occurrences and dynamic patterns from one file's text.

    Failures are logged and yield no keys for the file.
    """
    try:
        scan = _Scan(file_path, content, kind or file_kind(file_path))
        scan.run()
    except Exception as ex:
        logger.warning(f"Could not extract keys from {file_path}: {ex}")
        return [], []
    return scan.keys, scan.patterns


def extract_keys(
    file_path: str, content: str, kind: str | None = None
) -> list[TranslationKey]:
    return scan_content(file_path, content, kind)[0]


def extract_dynamic_patterns(content: str, kind: str | None = None) -> list[str]:
    return scan_content("<content>", content, kind)[1]
