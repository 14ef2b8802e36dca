"""Copy, cut, paste and duplicate of document items."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Literal, Protocol, runtime_checkable

from pydantic import Field, ValidationError

from controllers.selection import Selection_Controller
from controllers.store import Item_Store
from models.items import Id_Factory, Item, clone_item, new_id, plain_text
from models.styling import Model

logger = logging.getLogger(__name__)

ENVELOPE_KIND = "document-items"
ENVELOPE_VERSION = "1.0"
NOTHING_TO_PASTE = "Nothing to paste"


class Clipboard_Envelope(Model):
    kind: Literal["document-items"] = ENVELOPE_KIND
    version: str = ENVELOPE_VERSION
    items: list[Item] = Field(default_factory=list)
    plain_text: str = ""

    @classmethod
    def of(cls, items: Sequence[Item]) -> Clipboard_Envelope:
        return cls(items=[it.model_copy(deep=True) for it in items], plain_text=plain_text(items))

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def parse(cls, text: str | None) -> Clipboard_Envelope | None:
        """Parse clipboard text; None unless it is a well-formed envelope of our kind."""
        if not text:
            return None
        try:
            return cls.model_validate_json(text)
        except ValidationError as xcp:
            logger.debug("Clipboard text is not a %s envelope: %s", ENVELOPE_KIND, xcp.error_count())
            return None


# ---- system clipboards ----
class Clipboard_Unavailable(Exception):
    """The system clipboard refused a read or write."""


@runtime_checkable
class System_Clipboard(Protocol):
    async def read_text(self) -> str: ...
    async def write_text(self, text: str) -> None: ...


class Memory_Clipboard:
    """Process-local clipboard. `fail_writes` rejects writes whose text matches the predicate."""

    def __init__(self, text: str = "", fail_writes: Callable[[str], bool] | None = None) -> None:
        self.text = text
        self.fail_writes = fail_writes
        self.fail_reads = False
        self.writes: list[str] = []

    async def read_text(self) -> str:
        if self.fail_reads:
            raise Clipboard_Unavailable("read denied")
        return self.text

    async def write_text(self, text: str) -> None:
        if self.fail_writes and self.fail_writes(text):
            raise Clipboard_Unavailable("write denied")
        self.text = text
        self.writes.append(text)


# ---- manager ----
class Clipboard_Manager:
    """Transfers items through an internal envelope and the system clipboard.

    Only one clipboard operation runs at a time; a call arriving while another
    is awaiting the system clipboard is ignored.

    Args;
        store: The item store all insertions and removals go through.
        selection: Source of the targeted items and the paste anchor.
        system: System clipboard backend.
        id_factory: Produces fresh ids for pasted and duplicated items.
        before_mutation: Called right before the document changes.
        on_notice: Receives short user-facing notices.
    """

    def __init__(
        self,
        store: Item_Store,
        selection: Selection_Controller,
        system: System_Clipboard | None = None,
        *,
        id_factory: Id_Factory = new_id,
        duplicate_suffix: str = " Copy",
        before_mutation: Callable[[], None] | None = None,
        on_notice: Callable[[str], None] | None = None,
    ) -> None:
        self.store = store
        self.selection = selection
        self.system: System_Clipboard = system or Memory_Clipboard()
        self.id_factory = id_factory
        self.duplicate_suffix = duplicate_suffix
        self.before_mutation = before_mutation
        self.on_notice = on_notice
        self.envelope: Clipboard_Envelope | None = None
        self._in_flight = False

    @property
    def busy(self) -> bool:
        return self._in_flight

    @contextmanager
    def _critical(self, op: str) -> Iterator[bool]:
        if self._in_flight:
            logger.debug("Clipboard %s ignored: another operation is in flight", op)
            yield False
            return
        self._in_flight = True
        try:
            yield True
        finally:
            self._in_flight = False

    def selected_items(self) -> list[Item]:
        wanted = self.selection.selected
        return [it for it in self.store.items if it.id in wanted]

    # ---------- operations ----------
    async def copy(self) -> bool:
        with self._critical("copy") as ok:
            if not ok:
                return False
            return await self._copy()

    async def cut(self) -> bool:
        with self._critical("cut") as ok:
            if not ok:
                return False
            if not await self._copy():
                return False
            ids = {it.id for it in self.envelope.items} if self.envelope else set()
            self._mutating()
            self.store.remove(ids)
            self.selection.clear()
            logger.info("Cut %d item(s)", len(ids))
            return True

    async def paste(self) -> list[str]:
        """Insert the clipboard items after the anchor.

        Returns;
            The new item ids; empty when there was nothing usable to paste.
        """
        with self._critical("paste") as ok:
            if not ok:
                return []
            envelope = self.envelope
            if envelope is None:
                try:
                    text = await self.system.read_text()
                except Clipboard_Unavailable as xcp:
                    logger.warning("Clipboard read failed: %s", xcp)
                    text = ""
                envelope = Clipboard_Envelope.parse(text)
            if envelope is None or not envelope.items:
                self._notice(NOTHING_TO_PASTE)
                return []

            anchor = self.selection.anchor
            idx = self.store.index_of(anchor) if anchor is not None else None
            at = len(self.store) if idx is None else idx + 1
            clones = [clone_item(it, self.id_factory("paste")) for it in envelope.items]
            new_ids = self.insert_block(clones, at)
            logger.info("Pasted %d item(s) at %d", len(new_ids), at)
            return new_ids

    def duplicate(self) -> list[str]:
        """Clone the selection right after its last item."""
        if self._in_flight:
            logger.debug("Duplicate ignored: clipboard operation in flight")
            return []
        picked = self.selected_items()
        if not picked:
            return []
        last = self.store.index_of(picked[-1].id)
        at = len(self.store) if last is None else last + 1
        clones = [clone_item(it, self.id_factory("duplicate"), title_suffix=self.duplicate_suffix) for it in picked]
        new_ids = self.insert_block(clones, at)
        logger.info("Duplicated %d item(s)", len(new_ids))
        return new_ids

    def insert_block(self, items: Sequence[Item], at_index: int) -> list[str]:
        """Shared insertion path for pasted, duplicated, generated and added items."""
        if not items:
            return []
        self.store.check_new(items)
        self._mutating()
        return self.store.insert(items, at_index)

    # ---------- internals ----------
    async def _copy(self) -> bool:
        picked = self.selected_items()
        if not picked:
            return False
        self.envelope = Clipboard_Envelope.of(picked)
        await self._write_system(self.envelope)
        logger.info("Copied %d item(s)", len(picked))
        return True

    async def _write_system(self, envelope: Clipboard_Envelope) -> None:
        try:
            await self.system.write_text(envelope.to_json())
            return
        except Clipboard_Unavailable as xcp:
            logger.info("Structured clipboard write failed, falling back to plain text: %s", xcp)
        try:
            await self.system.write_text(envelope.plain_text)
        except Clipboard_Unavailable as xcp:
            logger.warning("Clipboard write failed: %s", xcp)

    def _mutating(self) -> None:
        if self.before_mutation:
            self.before_mutation()

    def _notice(self, text: str) -> None:
        logger.info("%s", text)
        if self.on_notice:
            self.on_notice(text)
