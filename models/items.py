"""Document items: cells, text sections and separators."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Annotated, Any, Final, Literal, Self, TypeAlias, assert_never

from pydantic import ConfigDict, Field, TypeAdapter

from models.styling import Model, Separator_Style

Id_Factory: TypeAlias = Callable[[str | None], str]


def new_id(prefix: str | None = None) -> str:
    """Return a fresh item id, optionally namespaced by a batch prefix."""
    token = uuid.uuid4().hex[:16]
    return f"{prefix}-{token}" if prefix else token


class Cell_Type(StrEnum):
    PYTHON = "python"
    R = "r"
    SQL = "sql"
    CHART = "chart"
    GPU = "gpu"
    TABLE = "table"
    PARAMS = "params"
    PROMPT = "prompt"

    @property
    def label(self) -> str:
        return _CELL_TYPES[self][0]

    @property
    def description(self) -> str:
        return _CELL_TYPES[self][1]


_CELL_TYPES: Final[dict[Cell_Type, tuple[str, str]]] = {
    Cell_Type.PYTHON: ("Python", "code + stdout"),
    Cell_Type.R: ("R", "code + console"),
    Cell_Type.SQL: ("SQL", "query + resultset"),
    Cell_Type.CHART: ("Chart", "visual output"),
    Cell_Type.GPU: ("GPU", "jobs + logs"),
    Cell_Type.TABLE: ("Table", "tabular data"),
    Cell_Type.PARAMS: ("Params", "hyperparameters"),
    Cell_Type.PROMPT: ("Prompt", "AI request → updates all"),
}


# ---- payloads ----
class Cell_Metadata(Model):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    locked: bool | None = None
    description: str | None = None
    parameters: dict[str, Any] | None = None


class Cell_Payload(Model):
    cell_type: Cell_Type = Cell_Type.PYTHON
    content: str = ""
    output: str | None = None
    metadata: Cell_Metadata = Field(default_factory=Cell_Metadata)


class Text_Payload(Model):
    content: str = ""
    is_locked: bool = False


class Separator_Payload(Model):
    style: Separator_Style = Separator_Style.LINE


# ---- items ----
class Base_Item(Model):
    id: str = Field(min_length=1)
    order: int = 0

    def with_id(self, item_id: str) -> Self:
        return self.model_copy(update={"id": item_id}, deep=True)


class Cell(Base_Item):
    kind: Literal["cell"] = "cell"
    payload: Cell_Payload = Field(default_factory=Cell_Payload)

    @property
    def title(self) -> str:
        return self.payload.metadata.title

    @classmethod
    def blank(cls, item_id: str, cell_type: Cell_Type = Cell_Type.PYTHON, title: str | None = None) -> Cell:
        meta = Cell_Metadata(title=title if title is not None else f"New {cell_type.value}")
        return cls(id=item_id, payload=Cell_Payload(cell_type=cell_type, metadata=meta))


class Text_Section(Base_Item):
    kind: Literal["text"] = "text"
    payload: Text_Payload = Field(default_factory=Text_Payload)

    @classmethod
    def blank(cls, item_id: str, content: str = "") -> Text_Section:
        return cls(id=item_id, payload=Text_Payload(content=content))


class Separator(Base_Item):
    kind: Literal["separator"] = "separator"
    payload: Separator_Payload = Field(default_factory=Separator_Payload)

    @classmethod
    def blank(cls, item_id: str, style: Separator_Style = Separator_Style.LINE) -> Separator:
        return cls(id=item_id, payload=Separator_Payload(style=style))


Item = Annotated[Cell | Text_Section | Separator, Field(discriminator="kind")]

ITEM_LIST: Final[TypeAdapter[list[Item]]] = TypeAdapter(list[Item])


def parse_items(raw: Iterable[Any]) -> list[Item]:
    """Validate raw dicts (or items) into typed items."""
    return ITEM_LIST.validate_python(list(raw))


def clone_item(item: Item, item_id: str, *, title_suffix: str = "") -> Item:
    """Deep copy an item under a new id. Cell titles get `title_suffix` appended."""
    match item:
        case Cell():
            dup = item.with_id(item_id)
            if title_suffix:
                dup.payload.metadata.title = f"{dup.payload.metadata.title}{title_suffix}"
            return dup
        case Text_Section() | Separator():
            return item.with_id(item_id)
        case _:
            assert_never(item)


def is_locked(item: Item) -> bool:
    match item:
        case Cell():
            return bool(item.payload.metadata.locked)
        case Text_Section():
            return item.payload.is_locked
        case Separator():
            return False
        case _:
            assert_never(item)


def render_text(item: Item) -> str:
    """Human readable rendering of one item, used for the plain-text clipboard fallback."""
    match item:
        case Cell():
            body = f"# {item.title}\n{item.payload.content}"
            if item.payload.output:
                body += f"\n\nOutput:\n{item.payload.output}"
            return body
        case Text_Section():
            return item.payload.content
        case Separator():
            return item.payload.style.rule
        case _:
            assert_never(item)


PLAIN_TEXT_JOIN = "\n\n---\n\n"


def plain_text(items: Iterable[Item]) -> str:
    return PLAIN_TEXT_JOIN.join(render_text(it) for it in items)
