import json
from pathlib import Path

import pytest

from disk.export import Exporter, document_markdown, document_text
from disk.formats import Formats
from disk.storage import IO, dict_to_document
from main import main
from models.document import SCHEMA_VERSION, Document
from models.items import Cell, Text_Section
from models.settings import Settings
from models.styling import Separator_Style
from models.version import get_app_version

from conftest import ids, make_items


@pytest.fixture
def doc() -> Document:
    items = make_items()
    items[0].payload.content = "print('hi')"
    items[0].payload.output = "hi"
    return Document.from_items(items, title="Report")


def test_document_round_trip(tmp_path, doc):
    path = tmp_path / "nb.json"
    IO.save_document(doc, path)
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["appVersion"] == get_app_version()
    assert "textSections" in raw
    loaded = IO.load_document(path)
    assert loaded.title == "Report"
    assert ids(loaded.items()) == ["A", "B", "C", "D"]
    assert loaded.cells[0].payload.output == "hi"
    assert loaded.separators[0].payload.style is Separator_Style.DOTTED


def test_missing_document_loads_empty(tmp_path):
    assert len(IO.load_document(tmp_path / "absent.json")) == 0


def test_unversioned_document_is_migrated():
    raw = {
        "title": "Old",
        "cells": [Cell.blank("c1", title="First").replace(order=1).dump()],
        "textSections": [Text_Section.blank("t1", "intro").dump()],
    }
    migrated = dict_to_document(raw)
    assert migrated.version == SCHEMA_VERSION
    assert migrated.separators == []
    assert ids(migrated.items()) == ["t1", "c1"]


def test_settings_round_trip_and_defaults(tmp_path):
    path = tmp_path / "cellwork.settings"
    assert IO.load_settings(path) == Settings()
    IO.save_settings(Settings(history_depth=7, default_separator=Separator_Style.THICK), path)
    loaded = IO.load_settings(path)
    assert loaded.history_depth == 7
    assert loaded.default_separator is Separator_Style.THICK


def test_settings_from_other_version_are_accepted(tmp_path):
    path = tmp_path / "cellwork.settings"
    path.write_text(json.dumps({"version": 0, "historyDepth": 5}), encoding="utf-8")
    assert IO.load_settings(path).history_depth == 5


def test_version_env_override(monkeypatch):
    monkeypatch.setenv("CELLWORK_VERSION", "9.9.9")
    get_app_version.cache_clear()
    try:
        assert get_app_version() == "9.9.9"
    finally:
        get_app_version.cache_clear()


@pytest.mark.parametrize(
    ("name", "fmt"),
    [("a.json", Formats.json), ("a.TXT", Formats.txt), ("a.md", Formats.md), ("a.markdown", Formats.md), ("a.pdf", None)],
)
def test_format_from_suffix(name, fmt):
    assert Formats.check(Path(name)) is fmt


def test_plain_text_export(doc):
    text = document_text(doc)
    assert text.startswith("Report\n\n# Alpha\nprint('hi')\n\nOutput:\nhi")
    assert "bravo" in text
    assert Separator_Style.DOTTED.rule in text
    assert document_text(Document(title="Empty")) == "Empty\n"


def test_markdown_export(doc):
    md = document_markdown(doc)
    assert md.startswith("# Report\n\n### Alpha\n\n```python\nprint('hi')\n```\n\n```text\nhi\n```")
    assert "\n\n* * *\n\n" in md
    assert "### Delta\n\n```sql\n\n```" in md


def test_exporter_dispatch(tmp_path, doc):
    out = Exporter.output(doc, tmp_path / "nb.md")
    assert out.read_text(encoding="utf-8") == document_markdown(doc)
    out = Exporter.output(doc, tmp_path / "nb.json")
    assert Document.model_validate_json(out.read_text(encoding="utf-8")).title == "Report"
    with pytest.raises(ValueError):
        Exporter.output(doc, tmp_path / "nb.pdf")


def test_main_prints_text(tmp_path, doc, capsys):
    path = tmp_path / "nb.json"
    IO.save_document(doc, path)
    assert main([str(path), "--settings", str(tmp_path / "none.settings")]) == 0
    assert capsys.readouterr().out == document_text(doc)


def test_main_exports_and_rejects_bad_input(tmp_path, doc):
    path = tmp_path / "nb.json"
    IO.save_document(doc, path)
    settings = ["--settings", str(tmp_path / "none.settings")]
    assert main([str(path), "-o", str(tmp_path / "nb.txt"), *settings]) == 0
    assert (tmp_path / "nb.txt").read_text(encoding="utf-8") == document_text(doc)
    assert main([str(path), "-o", str(tmp_path / "nb.pdf"), *settings]) == 2
    assert main([str(tmp_path / "missing.json"), *settings]) == 2
