"""
Unit Tests for core.locale module.
"""

import json
from pathlib import Path

from core.locale import Locale


PROJECT_LOCALES = Path(__file__).resolve().parent.parent / "locales"


def test_untranslated_key_falls_back_to_key():
    assert Locale().translate("Anonymous") == "Anonymous"


def test_default_wins_over_key():
    assert Locale().translate("Anonymous", "Nobody") == "Nobody"


def test_definition_wins_over_default():
    locale = Locale("de", {"Anonymous": "Anonym"})

    assert locale.translate("Anonymous", "Nobody") == "Anonym"


def test_set_translations():
    locale = Locale()
    locale.set_translations({"Greetings": "Grüße"})

    assert locale.translate("Greetings") == "Grüße"
    assert "Greetings" in locale


def test_load_from_directory(tmp_path):
    (tmp_path / "fr.json").write_text(json.dumps({"Greetings": "Salutations"}), encoding="utf-8")

    locale = Locale.load("fr", tmp_path)

    assert locale.code == "fr"
    assert locale.translate("Greetings") == "Salutations"


def test_load_missing_file_is_empty(tmp_path):
    locale = Locale.load("xx", tmp_path)

    assert locale.code == "xx"
    assert locale.translate("Greetings") == "Greetings"


def test_bundled_traditional_chinese_locale():
    locale = Locale.load("zh-TW", PROJECT_LOCALES)

    assert locale.translate("Greetings") == "問候"
    assert locale.translate("Anonymous") == "匿名訪客"
