"""Persistence helpers for Cellwork documents and settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from models.document import SCHEMA_VERSION, Document
from models.settings import SETTINGS_VERSION, Settings
from models.version import get_app_version

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_NAME = "cellwork.settings"


def default_settings_path() -> Path:
    """Return the default per-user settings path."""
    return Path.home() / DEFAULT_SETTINGS_NAME


def dict_to_document(dic: dict[str, Any]) -> Document:
    """Coerce a document dictionary into a Document, migrating if needed."""
    v = int(dic.get("version", 0))
    if v != SCHEMA_VERSION:
        dic = _migrate(dic, v)
    return Document.model_validate(dic)


class IO:
    """Read/write documents and settings on disk."""

    @staticmethod
    def save_document(doc: Document, path: Path) -> None:
        """Write a document to disk at the given path."""
        payload = doc.model_copy(update={"app_version": get_app_version()})
        path.write_text(payload.model_dump_json(indent=2, by_alias=True, exclude_none=True), encoding="utf-8")
        logger.info("Saved %d item(s) to %s", len(doc), path)

    @staticmethod
    def load_document(path: Path) -> Document:
        """Load a document from disk, returning an empty one when missing."""
        if not path.exists():
            logger.info("No document at %s, starting empty", path)
            return Document()
        raw = json.loads(path.read_text(encoding="utf-8"))
        return dict_to_document(raw)

    @staticmethod
    def save_settings(settings: Settings, path: Path | None = None) -> Path:
        """Write settings to disk and return the written path."""
        target = path or default_settings_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = settings.model_copy(update={"app_version": get_app_version()})
        target.write_text(payload.model_dump_json(indent=4, by_alias=True, exclude_none=True), encoding="utf-8")
        return target

    @staticmethod
    def load_settings(path: Path | None = None) -> Settings:
        """Load settings, falling back to defaults when the file is missing."""
        target = path or default_settings_path()
        if not target.exists():
            return Settings()
        raw = json.loads(target.read_text(encoding="utf-8"))
        if int(raw.get("version", 0)) != SETTINGS_VERSION:
            raw = {**raw, "version": SETTINGS_VERSION}
        return Settings.model_validate(raw)


def _migrate(data: dict[str, Any], from_version: int) -> dict[str, Any]:
    dic = dict(data)
    if from_version == 0:
        dic.setdefault("separators", [])
    dic["version"] = SCHEMA_VERSION
    logger.debug("Migrated document from schema %d", from_version)
    return dic
