from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import assert_never

from disk.formats import Formats
from models.document import Document
from models.items import Cell, Item, Separator, Text_Section, plain_text

logger = logging.getLogger(__name__)

# Cell types whose content is highlighted under a different fence name
_FENCE = {"python": "python", "r": "r", "sql": "sql", "params": "json"}


# -----------------------------------------------------------------------------
# Renderers
# -----------------------------------------------------------------------------


def document_text(doc: Document) -> str:
    """Plain text of a whole document: title line, then the items."""
    body = plain_text(doc.items())
    return f"{doc.title}\n\n{body}\n" if body else f"{doc.title}\n"


def _markdown_item(item: Item) -> str:
    match item:
        case Cell():
            fence = _FENCE.get(item.payload.cell_type.value, "")
            parts = [f"### {item.title}", f"```{fence}\n{item.payload.content}\n```"]
            if item.payload.output:
                parts.append(f"```text\n{item.payload.output}\n```")
            return "\n\n".join(parts)
        case Text_Section():
            return item.payload.content
        case Separator():
            return item.payload.style.markdown
        case _:
            assert_never(item)


def document_markdown(doc: Document) -> str:
    blocks = [f"# {doc.title}", *(_markdown_item(it) for it in doc.items())]
    return "\n\n".join(blocks) + "\n"


# -----------------------------------------------------------------------------
# Exporter
# -----------------------------------------------------------------------------


class Exporter:
    """
    Public API:
        - Exporter.output(doc, path) → Path
            Dispatches based on the path suffix
    """

    supported: dict[Formats, Callable[[Document, Path], Path]] = {}

    @classmethod
    def output(cls, doc: Document, path: Path) -> Path:
        fmt = Formats.check(path)
        func = cls.match_supported().get(fmt) if fmt else None
        if not fmt or not func:
            raise ValueError(f"Unsupported output type: {path.suffix}")
        out = func(doc, path)
        logger.info("Exported %s as %s", out, fmt)
        return out

    @classmethod
    def match_supported(cls) -> dict[Formats, Callable[[Document, Path], Path]]:
        """Build the dispatch table from Formats → handler methods."""
        if cls.supported:
            return cls.supported
        sups: dict[Formats, Callable[[Document, Path], Path]] = {}
        for fmt in Formats:
            handler = getattr(cls, fmt.name, None)
            if not callable(handler):
                raise NotImplementedError(f"Exporter missing handler for '{fmt.name}'")
            sups[fmt] = handler
        cls.supported = sups
        return sups

    # ---------------- Public handlers ----------------
    @staticmethod
    def json(doc: Document, path: Path) -> Path:
        path.write_text(doc.model_dump_json(indent=2, by_alias=True, exclude_none=True), encoding="utf-8")
        return path

    @staticmethod
    def txt(doc: Document, path: Path) -> Path:
        path.write_text(document_text(doc), encoding="utf-8")
        return path

    @staticmethod
    def md(doc: Document, path: Path) -> Path:
        path.write_text(document_markdown(doc), encoding="utf-8")
        return path
