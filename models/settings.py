from pydantic import Field

from models.items import Cell_Type
from models.styling import Model, Separator_Style

SETTINGS_VERSION = 1


class Settings(Model):
    history_depth: int = Field(default=50, ge=1)
    marquee_item_ratio: float = Field(default=0.10, ge=0.0, le=1.0)
    marquee_area_ratio: float = Field(default=0.50, ge=0.0, le=1.0)
    default_cell_type: Cell_Type = Cell_Type.PYTHON
    default_separator: Separator_Style = Separator_Style.LINE
    duplicate_suffix: str = " Copy"
    log_level: str = "WARNING"
    app_version: str | None = None
    version: int = Field(default=SETTINGS_VERSION)
