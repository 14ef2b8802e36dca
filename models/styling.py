from __future__ import annotations

from enum import StrEnum
from typing import Final, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Model(BaseModel):
    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def replace(self, **updates) -> Self:
        return self.model_copy(update=updates)

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Separator_Style(StrEnum):
    LINE = "line"
    DOTTED = "dotted"
    DASHED = "dashed"
    THICK = "thick"

    @classmethod
    def parse(cls, value: str | Separator_Style | None) -> Separator_Style:
        if isinstance(value, Separator_Style):
            return value
        if not value:
            return cls.LINE
        v = value.lower().strip()
        return next((s for s in cls if s.value == v), cls.LINE)

    @property
    def rule(self) -> str:
        """Plain-text rendering of the separator."""
        return _RULES[self]

    @property
    def markdown(self) -> str:
        return _MD[self]


RULE_WIDTH = 40

_RULES: Final[dict[Separator_Style, str]] = {
    Separator_Style.LINE: "─" * RULE_WIDTH,
    Separator_Style.DOTTED: "·" * RULE_WIDTH,
    Separator_Style.DASHED: ("- " * (RULE_WIDTH // 2)).rstrip(),
    Separator_Style.THICK: "━" * RULE_WIDTH,
}

_MD: Final[dict[Separator_Style, str]] = {
    Separator_Style.LINE: "---",
    Separator_Style.DOTTED: "* * *",
    Separator_Style.DASHED: "- - -",
    Separator_Style.THICK: "___",
}
