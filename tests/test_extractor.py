import logging

from i18ncheck import extractor
from i18ncheck.extractor import (
    HTML,
    SCRIPT,
    extract_dynamic_patterns,
    extract_keys,
    file_kind,
    fold_expression,
    is_valid_pattern,
    scan_content,
)


def summary(keys):
    return [(k.key, k.context) for k in keys]


def test_pipe_usage_in_templates():
    content = "<h1>{{ 'home.title' | translate }}</h1>\n<p>{{ \"home.subtitle\" | translate:params }}</p>"
    keys = extract_keys("home.component.html", content)
    assert [(k.key, k.line, k.context) for k in keys] == [
        ("home.title", 1, "static"),
        ("home.subtitle", 2, "static"),
    ]
    assert keys[0].column == 9
    assert keys[0].file == "home.component.html"


def test_line_and_column_are_one_based():
    keys = extract_keys("a.ts", "a\n  translate.instant('x.y')")
    assert (keys[0].line, keys[0].column) == (2, 22)


def test_known_and_custom_service_calls():
    content = """
    this.translate.instant('user.name');
    this.translateService.get("user.email");
    this.myCustomService.translate('custom.label');
    this.i18nService.get('SIMPLE');
    this.params.get('id');
    this.cache.get('plain');
    """
    keys = extract_keys("a.ts", content)
    assert {k.key for k in keys} == {"user.name", "user.email", "custom.label", "SIMPLE"}
    assert all(k.context == "static" for k in keys)


def test_bare_identifier_yields_nothing():
    content = "this.translate.instant(someVariableKey);"
    assert extract_keys("a.ts", content) == []
    assert extract_dynamic_patterns(content) == []


def test_template_literal_becomes_pattern():
    keys, patterns = scan_content("a.ts", "this.translate.instant(`country.code.${code}`);")
    assert patterns == ["country.code.*"]
    assert summary(keys) == [("country.code.*", "dynamic")]


def test_concatenation_becomes_pattern():
    content = "this.translate.get('errors.' + type + '.message').subscribe();"
    assert extract_dynamic_patterns(content) == ["errors.*.message"]
    assert [k for k in extract_keys("a.ts", content) if k.context != "dynamic"] == []


def test_adjacent_holes_collapse():
    content = "translate.instant(`a.${x}${y}.b`)"
    assert extract_dynamic_patterns(content) == ["a.*.b"]


def test_holes_with_function_calls():
    content = "this.translate.get(`ACCESS_RIGHTS.INFO.${toScreamingSnakeCase(key)}`);"
    assert extract_dynamic_patterns(content) == ["ACCESS_RIGHTS.INFO.*"]


def test_bare_wildcard_is_rejected():
    assert extract_dynamic_patterns("translate.instant(`${key}`)") == []
    assert not is_valid_pattern("*")
    assert not is_valid_pattern("a")
    assert is_valid_pattern("a.*")


def test_literal_concatenation_folds_to_static_key():
    content = "this.textService.translate('DYNAMIC.' + 'PATTERN' + '.TEST');"
    keys = extract_keys("a.ts", content)
    assert summary(keys) == [("DYNAMIC.PATTERN.TEST", "static")]


def test_unrelated_calls_do_not_produce_patterns():
    content = "this.http.get(`${environment.api}/users/${id}`);"
    assert extract_dynamic_patterns(content) == []


def test_template_pipe_in_html():
    content = "<div *ngIf=\"errorType\">{{ `ERROR_MESSAGES.${errorType}` | translate }}</div>"
    keys, patterns = scan_content("a.html", content)
    assert patterns == ["ERROR_MESSAGES.*"]
    assert summary(keys) == [("ERROR_MESSAGES.*", "dynamic")]


def test_concatenation_pipe_in_html():
    content = "<span>{{ 'status.' + item.state | translate }}</span>"
    keys, patterns = scan_content("a.html", content)
    assert patterns == ["status.*"]
    assert summary(keys) == [("status.*", "dynamic")]


def test_parenthesised_concatenation_pipe():
    content = "<span [title]=\"('menu.' + name) | translate\"></span>"
    assert extract_dynamic_patterns(content, HTML) == ["menu.*"]


def test_standalone_keys():
    content = """
    handleErrorsResponse(error, this.toast, 'COMMON.TOAST.ERROR.MESSAGE.ACCESS_RIGHTS');
    foo('lower.dotted.value', 'SINGLE', 'NOT.lower');
    """
    keys = extract_keys("a.ts", content)
    assert summary(keys) == [("COMMON.TOAST.ERROR.MESSAGE.ACCESS_RIGHTS", "standalone")]


def test_one_key_per_occurrence():
    keys = extract_keys("a.ts", "this.translate.instant('COMMON.TITLE');")
    assert summary(keys) == [("COMMON.TITLE", "static")]


def test_duplicates_across_occurrences_are_kept():
    content = "translate.instant('a.b');\ntranslate.instant('a.b');"
    assert [k.line for k in extract_keys("a.ts", content)] == [1, 2]


def test_constants_enums_and_object_literals():
    content = """
export const MESSAGES = {
  ERROR: 'error.message',
  PATH: './assets/logo.png',
  LABEL: 'plain',
};
export enum Status {
  ACTIVE = 'status.active',
  INACTIVE = 'status.inactive',
}
export enum Plain { A, B }
class C {
  private readonly TITLE = 'page.title';
}
const SUCCESS_SAVED = 'success.saved';
"""
    keys = extract_keys("constants.ts", content)
    assert summary(keys) == [
        ("error.message", "constant"),
        ("status.active", "constant"),
        ("status.inactive", "constant"),
        ("page.title", "constant"),
        ("success.saved", "constant"),
    ]


def test_key_arrays():
    keys = extract_keys("a.ts", "this.translate.get(['menu.home', 'menu.about']).subscribe();")
    assert summary(keys) == [("menu.home", "static"), ("menu.about", "static")]


def test_translate_directives_in_html():
    content = "<div translate=\"nav.home\"></div>\n<span [translate]=\"'nav.about'\"></span>"
    keys = extract_keys("nav.component.html", content)
    assert summary(keys) == [("nav.home", "static"), ("nav.about", "static")]


def test_directives_are_html_only():
    assert extract_keys("a.ts", 'el.setAttribute(translate="a.b")') == []


def test_keys_are_trimmed():
    keys = extract_keys("a.html", "{{ ' home.title ' | translate }}")
    assert summary(keys) == [("home.title", "static")]


def test_extraction_failure_yields_no_keys(monkeypatch, caplog):
    def boom(self):
        raise RuntimeError("catastrophic backtracking")

    monkeypatch.setattr(extractor._Scan, "run", boom)
    caplog.set_level(logging.WARNING)
    assert scan_content("broken.ts", "translate.instant('a.b')") == ([], [])
    assert "broken.ts" in caplog.text


def test_fold_expression():
    assert fold_expression("'a.' + b") == "a.*"
    assert fold_expression("`x.${y}.z`") == "x.*.z"
    assert fold_expression("'a.' + 'b'") == "a.b"
    assert fold_expression("someVar") is None
    assert fold_expression("a + b") is None


def test_file_kind():
    assert file_kind("src/app/a.component.html") == HTML
    assert file_kind("src/app/a.component.ts") == SCRIPT
    assert file_kind("views/page.tpl", {"html": ["**/*.tpl"]}) == HTML
    assert file_kind("views/page.tpl", {"typescript": ["**/*.ts"]}) == SCRIPT


def test_all_caps_keys_from_any_service():
    content = "this.localizationService.instant('WELCOME');\nthis.params.get('id');"
    assert summary(extract_keys("a.ts", content)) == [("WELCOME", "static")]


def test_typed_class_members():
    content = """class C {
  public successMessage: string = 'success.message';
  protected readonly title: string = 'page.title';
  errorMessage: string = 'error.message';
  constructor(private translate: TranslateService) {}
}
"""
    assert summary(extract_keys("a.ts", content)) == [
        ("success.message", "constant"),
        ("page.title", "constant"),
        ("error.message", "constant"),
    ]


def test_nested_object_constants():
    content = """export const KEYS = {
  errors: {
    required: 'errors.required',
    email: { invalid: 'errors.email.invalid' },
  },
  title: 'page.title',
};
"""
    assert summary(extract_keys("keys.ts", content)) == [
        ("errors.required", "constant"),
        ("errors.email.invalid", "constant"),
        ("page.title", "constant"),
    ]
    inline = "export const KEYS = { errors: { required: 'errors.required' } };"
    assert summary(extract_keys("keys.ts", inline)) == [("errors.required", "constant")]
