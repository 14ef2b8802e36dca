import enum
from pathlib import Path


class Formats(enum.StrEnum):
    json = enum.auto()
    txt = enum.auto()
    md = enum.auto()

    @classmethod
    def check(cls, path: Path) -> "Formats | None":
        suf = path.suffix[1:].lower()
        if suf == "markdown":
            return cls.md
        return Formats(suf) if suf in Formats else None
