import json
from pathlib import Path

import pytest

EN = {
    "home": {"title": "Home", "unused": "Never shown"},
    "country": {"code": {"21": "Mexico", "33": "France"}},
    "debug": {"api": "Debug API"},
    "COMMON": {"TOAST": {"TITLE": "Error"}},
}
FR = {"home": {"title": "Accueil"}}

HOME_HTML = """<h1>{{ 'home.title' | translate }}</h1>
<p>{{ 'legacy.key' | translate }}</p>
"""

HOME_TS = """import { Component } from '@angular/core';

export class HomeComponent {
  constructor(private translate: TranslateService) {}

  country(code: string) {
    return this.translate.instant(`country.code.${code}`);
  }

  fail() {
    notify(this.translate.instant('missing.key'), 'COMMON.TOAST.TITLE');
  }
}
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    locales = tmp_path / "src" / "assets" / "i18n"
    locales.mkdir(parents=True)
    (locales / "en.json").write_text(json.dumps(EN), "utf-8")
    (locales / "fr.json").write_text(json.dumps(FR), "utf-8")

    app = tmp_path / "src" / "app"
    app.mkdir()
    (app / "home.component.html").write_text(HOME_HTML, "utf-8")
    (app / "home.component.ts").write_text(HOME_TS, "utf-8")

    vendor = tmp_path / "src" / "node_modules" / "lib"
    vendor.mkdir(parents=True)
    (vendor / "index.ts").write_text("x = 'home.unused' | translate;", "utf-8")
    return tmp_path
