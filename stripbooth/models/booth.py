from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class TemplateType(str, Enum):
    classic = "classic"
    quad = "quad"
    duo = "duo"


class FilterType(str, Enum):
    none = "none"
    grayscale = "grayscale"
    sepia = "sepia"
    invert = "invert"
    warm = "warm"
    cool = "cool"


class PatternKind(str, Enum):
    dots = "dots"
    stars = "stars"
    hearts = "hearts"
    solid = "solid"


class BoothStage(str, Enum):
    idle = "idle"
    active = "active"


class BoothSettingsRequest(BaseModel):
    template: Optional[TemplateType] = None
    filter: Optional[FilterType] = None
    flipped: Optional[bool] = None
    border_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    pattern: Optional[PatternKind] = None


class ExportRequest(BaseModel):
    portrait: Optional[bool] = None


class BoothStatusResponse(BaseModel):
    stage: BoothStage
    template: TemplateType
    filter: FilterType
    flipped: bool
    border_color: str
    pattern: PatternKind
    slot_count: int
    empty_slots: int
    slots: List[Optional[str]] = []


class CaptureResponse(BaseModel):
    captured: bool
    index: Optional[int] = None
    empty_slots: int
    photo: Optional[str] = None


class ExportResponse(BaseModel):
    success: bool
    filename: str
    download_url: str
    strip: str


class FilterInfo(BaseModel):
    id: FilterType
    name: str
    css: str


class TemplateInfo(BaseModel):
    id: TemplateType
    name: str
    slots: int


class CatalogResponse(BaseModel):
    filters: List[FilterInfo]
    templates: List[TemplateInfo]
    patterns: List[PatternKind]
