"""Document editing session: the object a hosting view owns and renders from."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Mapping
from pathlib import Path
from typing import Any, assert_never

from pydantic import ValidationError

from canvas.bounds import Bounds_Provider
from canvas.geometry import Rect
from canvas.marquee import Thresholds
from controllers.clipboard import Clipboard_Manager, System_Clipboard
from controllers.history import History_Manager
from controllers.reorder import Reorder_Engine
from controllers.selection import Direction, Selection_Controller
from controllers.store import Item_Store
from disk.storage import IO
from models.document import Document
from models.items import (
    Cell,
    Cell_Metadata,
    Cell_Payload,
    Cell_Type,
    Id_Factory,
    Item,
    Separator,
    Text_Payload,
    Text_Section,
    is_locked,
    new_id,
)
from models.settings import Settings
from models.styling import Separator_Style
from ui.keys import NEEDS_SELECTION, Action

logger = logging.getLogger(__name__)

GENERATED_TITLE = "Generated Cell"


class Session:
    """Wires the item store, selection, clipboard, reorder engine and history.

    Structural edits record a history snapshot right before they change the
    document. Content edits do not, unless the caller asks for it with
    `record=True` at the granularity it wants.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        settings: Settings | None = None,
        system_clipboard: System_Clipboard | None = None,
        bounds: Bounds_Provider | None = None,
        id_factory: Id_Factory = new_id,
        on_notice: Callable[[str], None] | None = None,
    ) -> None:
        """Create a session.

        Args;
            document: Initial document; empty when omitted.
            settings: Behaviour knobs; defaults when omitted.
            system_clipboard: Backend for cross-application copy/paste.
            bounds: Geometry source for marquee selection.
            id_factory: Produces fresh item ids.
            on_notice: Receives short user-facing notices.
        """
        doc = document or Document()
        self.settings = settings or Settings()
        self.id_factory = id_factory
        self.title = doc.title
        self.project_path: Path | None = None
        self.dirty = False

        self.store = Item_Store(doc.items())
        self.selection = Selection_Controller(
            self.store.ids,
            bounds,
            Thresholds(self.settings.marquee_item_ratio, self.settings.marquee_area_ratio),
        )
        self.history = History_Manager(self.store, self.settings.history_depth, on_after=self._prune_selection)
        self.clipboard = Clipboard_Manager(
            self.store,
            self.selection,
            system_clipboard,
            id_factory=id_factory,
            duplicate_suffix=self.settings.duplicate_suffix,
            before_mutation=self.history.record_before_mutation,
            on_notice=on_notice,
        )
        self.reorder = Reorder_Engine(self.store, self.selection, before_mutation=self.history.record_before_mutation)
        self.store.subscribe(self.mark_dirty)

    # ========= read state =========
    @property
    def items(self) -> tuple[Item, ...]:
        return self.store.items

    @property
    def selected(self) -> frozenset[str]:
        return self.selection.selected

    @property
    def anchor(self) -> str | None:
        return self.selection.anchor

    @property
    def marquee(self) -> Rect | None:
        return self.selection.state.marquee

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def get(self, item_id: str) -> Item | None:
        return self.store.get(item_id)

    def subscribe(self, fn: Callable[[], None]) -> Callable[[], None]:
        return self.store.subscribe(fn)

    def mark_dirty(self) -> None:
        self.dirty = True

    def mark_clean(self) -> None:
        self.dirty = False

    # ========= adding =========
    def add_cell(self, cell_type: Cell_Type | None = None, after_id: str | None = None) -> str:
        cell = Cell.blank(self.id_factory(None), cell_type or self.settings.default_cell_type)
        return self._add(cell, after_id)

    def add_text_section(self, after_id: str | None = None, content: str = "") -> str:
        return self._add(Text_Section.blank(self.id_factory(None), content), after_id)

    def add_separator(self, style: Separator_Style | str | None = None, after_id: str | None = None) -> str:
        sty = Separator_Style.parse(style) if style else self.settings.default_separator
        return self._add(Separator.blank(self.id_factory(None), sty), after_id)

    def generate_cells(self, batch: Iterable[Mapping[str, Any]], after_id: str | None = None) -> list[str]:
        """Insert a batch of partial cell payloads after `after_id` (or at the end).

        Each entry may carry `cellType`/`type`, `content`, `output` and `metadata`;
        a missing title becomes "Generated Cell". Invalid entries are skipped.
        """
        cells: list[Item] = []
        for partial in batch:
            data = dict(partial)
            if "type" in data and "cellType" not in data and "cell_type" not in data:
                data["cellType"] = data.pop("type")
            data.setdefault("metadata", {})
            try:
                payload = Cell_Payload.model_validate(data)
            except ValidationError as xcp:
                logger.warning("Skipping generated cell: %s", xcp)
                continue
            if not payload.metadata.title:
                payload.metadata.title = GENERATED_TITLE
            cells.append(Cell(id=self.id_factory("generated"), payload=payload))
        return self.clipboard.insert_block(cells, self._after(after_id))

    def _after(self, after_id: str | None) -> int:
        idx = self.store.index_of(after_id) if after_id is not None else None
        return len(self.store) if idx is None else idx + 1

    def _add(self, item: Item, after_id: str | None) -> str:
        self.clipboard.insert_block([item], self._after(after_id))
        return item.id

    # ========= editing =========
    def update_cell(
        self,
        item_id: str,
        *,
        content: str | None = None,
        output: str | None = None,
        title: str | None = None,
        record: bool = False,
    ) -> bool:
        """Change a cell's content, output or title. Locked cells refuse content changes."""
        cell = self.store.get(item_id)
        if not isinstance(cell, Cell):
            return False
        if content is not None and is_locked(cell):
            return False
        payload = cell.payload.model_copy(deep=True)
        if content is not None:
            payload.content = content
        if output is not None:
            payload.output = output
        if title is not None:
            payload.metadata.title = title
        if payload == cell.payload:
            return False
        if record:
            self.history.record_before_mutation()
        self.store.update(cell.replace(payload=payload))
        return True

    def update_text(self, item_id: str, content: str, *, record: bool = False) -> bool:
        section = self.store.get(item_id)
        if not isinstance(section, Text_Section) or is_locked(section):
            return False
        if section.payload.content == content:
            return False
        if record:
            self.history.record_before_mutation()
        self.store.update(section.replace(payload=section.payload.replace(content=content)))
        return True

    def toggle_lock(self, item_id: str) -> bool:
        item = self.store.get(item_id)
        match item:
            case Cell():
                meta = item.payload.metadata.replace(locked=not item.payload.metadata.locked)
                updated: Item = item.replace(payload=item.payload.replace(metadata=meta))
            case Text_Section():
                updated = item.replace(payload=item.payload.replace(is_locked=not item.payload.is_locked))
            case _:
                return False
        self.history.record_before_mutation()
        self.store.update(updated)
        return True

    def set_separator_style(self, item_id: str, style: Separator_Style | str) -> bool:
        item = self.store.get(item_id)
        sty = Separator_Style.parse(style)
        if not isinstance(item, Separator) or item.payload.style is sty:
            return False
        self.history.record_before_mutation()
        self.store.update(item.replace(payload=item.payload.replace(style=sty)))
        return True

    def convert_cell_to_text(self, item_id: str) -> bool:
        """Turn a cell into a text section with the same id, position and content."""
        cell = self.store.get(item_id)
        if not isinstance(cell, Cell):
            return False
        self.history.record_before_mutation()
        self.store.update(Text_Section(id=cell.id, order=cell.order, payload=Text_Payload(content=cell.payload.content)))
        return True

    def convert_text_to_cell(self, item_id: str, cell_type: Cell_Type = Cell_Type.PYTHON) -> bool:
        """Turn a text section into a cell with the same id, position and content."""
        section = self.store.get(item_id)
        if not isinstance(section, Text_Section):
            return False
        self.history.record_before_mutation()
        payload = Cell_Payload(
            cell_type=cell_type,
            content=section.payload.content,
            metadata=Cell_Metadata(title=f"Converted {cell_type.value} Cell"),
        )
        self.store.update(Cell(id=section.id, order=section.order, payload=payload))
        return True

    def set_title(self, title: str) -> None:
        if title != self.title:
            self.title = title
            self.mark_dirty()

    # ========= deleting =========
    def delete(self, ids: Collection[str]) -> int:
        present = [i for i in ids if i in self.store]
        if not present:
            return 0
        self.history.record_before_mutation()
        removed = self.store.remove(present)
        self._prune_selection()
        return len(removed)

    def delete_selected(self) -> int:
        return self.delete(self.selection.selected)

    def clear_all(self) -> bool:
        if not len(self.store):
            return False
        self.history.record_before_mutation()
        self.store.replace_all([])
        self.selection.clear()
        logger.info("Cleared all items")
        return True

    # ========= clipboard =========
    async def copy(self) -> bool:
        return await self.clipboard.copy()

    async def cut(self) -> bool:
        return await self.clipboard.cut()

    async def paste(self) -> list[str]:
        return await self.clipboard.paste()

    def duplicate(self) -> list[str]:
        return self.clipboard.duplicate()

    # ========= reorder =========
    def move_up(self) -> bool:
        return self.reorder.move_up()

    def move_down(self) -> bool:
        return self.reorder.move_down()

    def drag_end(self, dragged_id: str, destination: int | None) -> bool:
        return self.reorder.drag_end(dragged_id, destination)

    # ========= history =========
    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def _prune_selection(self) -> None:
        self.selection.retain(self.store.ids())

    # ========= keyboard =========
    async def perform(self, action: Action) -> bool:
        """Run a keyboard action. Returns whether it did anything."""
        if action in NEEDS_SELECTION and not len(self.selection):
            return False
        match action:
            case Action.copy:
                return await self.copy()
            case Action.cut:
                return await self.cut()
            case Action.paste:
                return bool(await self.paste())
            case Action.duplicate:
                return bool(self.duplicate())
            case Action.delete:
                return bool(self.delete_selected())
            case Action.clear_selection:
                self.selection.clear()
                return True
            case Action.select_all:
                self.selection.select_all()
                return True
            case Action.nav_up | Action.extend_up:
                return self.selection.arrow_nav(Direction.up, extend=action is Action.extend_up)
            case Action.nav_down | Action.extend_down:
                return self.selection.arrow_nav(Direction.down, extend=action is Action.extend_down)
            case Action.move_up:
                return self.move_up()
            case Action.move_down:
                return self.move_down()
            case Action.undo:
                return self.undo()
            case Action.redo:
                return self.redo()
            case _:
                assert_never(action)

    # ========= documents =========
    def to_document(self) -> Document:
        return Document.from_items(self.store.items, title=self.title)

    def load_document(self, doc: Document) -> None:
        self.store.replace_all(doc.items())
        self.title = doc.title
        self.history.reset()
        self.selection.clear()
        self.mark_clean()

    def save(self, path: Path | None = None) -> Path:
        target = path or self.project_path
        if target is None:
            raise ValueError("No path to save to")
        IO.save_document(self.to_document(), target)
        self.project_path = target
        self.mark_clean()
        return target

    def open(self, path: Path) -> None:
        self.load_document(IO.load_document(path))
        self.project_path = path
