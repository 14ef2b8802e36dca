from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field

from models.items import Cell, Item, Separator, Text_Section
from models.styling import Model

SCHEMA_VERSION = 1


class Document(Model):
    """Persisted form of a notebook: items split per kind, plus the title."""

    title: str = "Untitled Notebook"
    cells: list[Cell] = Field(default_factory=list)
    text_sections: list[Text_Section] = Field(default_factory=list)
    separators: list[Separator] = Field(default_factory=list)
    app_version: str | None = None
    version: int = Field(default=SCHEMA_VERSION)

    @classmethod
    def from_items(cls, items: Iterable[Item], title: str = "Untitled Notebook") -> Document:
        doc = cls(title=title)
        for it in items:
            match it:
                case Cell():
                    doc.cells.append(it.model_copy(deep=True))
                case Text_Section():
                    doc.text_sections.append(it.model_copy(deep=True))
                case Separator():
                    doc.separators.append(it.model_copy(deep=True))
        return doc

    def items(self) -> list[Item]:
        """All items merged into document order.

        Orders are taken as stored; the Item Store renumbers on load.
        """
        merged: list[Item] = [*self.text_sections, *self.cells, *self.separators]
        return sorted((it.model_copy(deep=True) for it in merged), key=lambda it: it.order)

    def __len__(self) -> int:
        return len(self.cells) + len(self.text_sections) + len(self.separators)
