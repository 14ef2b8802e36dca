import json

from models.document import Document
from models.items import (
    PLAIN_TEXT_JOIN,
    Cell,
    Cell_Type,
    Separator,
    Text_Section,
    clone_item,
    is_locked,
    new_id,
    parse_items,
    plain_text,
    render_text,
)
from models.styling import Separator_Style

from conftest import make_items


def test_parse_items_uses_kind_tag():
    raw = [
        {"id": "a", "kind": "cell", "order": 0, "payload": {"cellType": "sql", "content": "select 1", "metadata": {"title": "Q"}}},
        {"id": "b", "kind": "text", "order": 1, "payload": {"content": "hi", "isLocked": True}},
        {"id": "c", "kind": "separator", "order": 2, "payload": {"style": "thick"}},
    ]
    a, b, c = parse_items(raw)
    assert isinstance(a, Cell) and a.payload.cell_type is Cell_Type.SQL
    assert isinstance(b, Text_Section) and b.payload.is_locked
    assert isinstance(c, Separator) and c.payload.style is Separator_Style.THICK


def test_dump_uses_camel_case_and_drops_none():
    cell = Cell.blank("x", Cell_Type.R, title="R cell")
    dumped = cell.dump()
    assert dumped["payload"]["cellType"] == "r"
    assert "output" not in dumped["payload"]
    assert dumped["kind"] == "cell"


def test_metadata_keeps_unknown_fields():
    (cell,) = parse_items(
        [{"id": "a", "kind": "cell", "payload": {"metadata": {"title": "T", "chartData": {"type": "bar", "data": []}}}}]
    )
    assert json.loads(cell.model_dump_json(by_alias=True))["payload"]["metadata"]["chartData"]["type"] == "bar"


def test_clone_is_deep_and_renames_cells_only():
    cell, text, sep, _ = make_items()
    dup = clone_item(cell, "A2", title_suffix=" Copy")
    assert dup.id == "A2"
    assert dup.title == "Alpha Copy"
    assert cell.title == "Alpha"
    dup.payload.content = "changed"
    assert cell.payload.content == ""

    assert clone_item(text, "B2", title_suffix=" Copy").payload.content == "bravo"
    assert clone_item(sep, "C2").payload.style is Separator_Style.DOTTED


def test_render_text_per_kind():
    cell = Cell.blank("a", title="Load")
    cell.payload.content = "x = 1"
    assert render_text(cell) == "# Load\nx = 1"
    cell.payload.output = "1"
    assert render_text(cell) == "# Load\nx = 1\n\nOutput:\n1"
    assert render_text(Text_Section.blank("b", "words")) == "words"
    assert render_text(Separator.blank("c", Separator_Style.THICK)) == Separator_Style.THICK.rule


def test_plain_text_joins_with_visible_separator():
    items = make_items()[:2]
    assert plain_text(items) == f"# Alpha\n{PLAIN_TEXT_JOIN}bravo"


def test_is_locked():
    cell = Cell.blank("a")
    assert not is_locked(cell)
    cell.payload.metadata.locked = True
    assert is_locked(cell)
    assert not is_locked(Separator.blank("s"))


def test_new_id_prefix_and_uniqueness():
    made = {new_id("paste") for _ in range(200)}
    assert len(made) == 200
    assert all(i.startswith("paste-") for i in made)


def test_separator_style_parse_falls_back_to_line():
    assert Separator_Style.parse("Dashed") is Separator_Style.DASHED
    assert Separator_Style.parse("wavy") is Separator_Style.LINE
    assert Separator_Style.parse(None) is Separator_Style.LINE


def test_document_split_and_merge():
    doc = Document.from_items(make_items(), title="Notes")
    assert [c.id for c in doc.cells] == ["A", "D"]
    assert [t.id for t in doc.text_sections] == ["B"]
    assert [s.id for s in doc.separators] == ["C"]
    assert [it.id for it in doc.items()] == ["A", "B", "C", "D"]
    assert len(doc) == 4
