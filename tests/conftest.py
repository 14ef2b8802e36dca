from __future__ import annotations

import pytest

from controllers.clipboard import Memory_Clipboard
from controllers.session import Session
from controllers.store import Item_Store
from models.items import Cell, Cell_Type, Item, Separator, Text_Section
from models.styling import Separator_Style


class Counter_Ids:
    """Deterministic id factory: prefix-1, prefix-2, ..."""

    def __init__(self) -> None:
        self.n = 0

    def __call__(self, prefix: str | None = None) -> str:
        self.n += 1
        return f"{prefix or 'id'}-{self.n}"


def make_items() -> list[Item]:
    """A, B, C, D: cell, text, separator, cell."""
    return [
        Cell.blank("A", Cell_Type.PYTHON, title="Alpha").replace(order=0),
        Text_Section.blank("B", "bravo").replace(order=1),
        Separator.blank("C", Separator_Style.DOTTED).replace(order=2),
        Cell.blank("D", Cell_Type.SQL, title="Delta").replace(order=3),
    ]


def orders(items) -> list[int]:
    return [it.order for it in items]


def ids(items) -> list[str]:
    return [it.id for it in items]


@pytest.fixture
def id_factory() -> Counter_Ids:
    return Counter_Ids()


@pytest.fixture
def store() -> Item_Store:
    return Item_Store(make_items())


@pytest.fixture
def system_clipboard() -> Memory_Clipboard:
    return Memory_Clipboard()


@pytest.fixture
def session(id_factory, system_clipboard) -> Session:
    s = Session(system_clipboard=system_clipboard, id_factory=id_factory)
    s.store.replace_all(make_items())
    s.mark_clean()
    return s
