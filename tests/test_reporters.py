from i18ncheck.analyzer import reconcile
from i18ncheck.classes import IgnoreRuleSet
from i18ncheck.reporters import report, report_file


def test_report_file(tmp_path):
    path = report_file("<xml/>", str(tmp_path / "out"), "xml")

    assert path.name.startswith("translation-analysis-")
    assert path.suffix == ".xml"
    assert path.read_text("utf-8") == "<xml/>"
    assert (tmp_path / "out" / "latest.xml").read_text("utf-8") == "<xml/>"


def test_report_echoes_output(tmp_path, capsys):
    result = reconcile({"a.b"}, [], set(), IgnoreRuleSet())
    report(result, "Unused keys: 1\n", str(tmp_path), "console")

    assert capsys.readouterr().out == "Unused keys: 1\n"
    assert (tmp_path / "latest.txt").read_text("utf-8") == "Unused keys: 1\n"
