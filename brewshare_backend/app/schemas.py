# schemas.py  (record models for the share/import layer)

from __future__ import annotations
import math
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ===================== Enums =====================

class PourType(str, Enum):
    CENTER = "center"   # 中心注水
    CIRCLE = "circle"   # 绕圈注水 (also legacy "spiral")
    ICE = "ice"         # 添加冰块
    OTHER = "other"     # 其他方式

class ValveStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    UNSET = ""

class RecordKind(str, Enum):
    METHOD = "method"
    BEAN = "bean"
    NOTE = "note"


# ===================== Coercion helpers =====================

def _to_int(v: Any, default: int = 0) -> int:
    if v is None or isinstance(v, bool):
        return default
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if math.isfinite(v) else default
    try:
        return int(float(str(v).strip()))
    except (ValueError, OverflowError):
        return default

def _clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))

def _none_to_empty(v: Any) -> Any:
    return "" if v is None else v


# Shared config: camelCase on the wire, snake_case in Python, tolerate extras.
class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


# ===================== Method =====================

class Stage(_Record):
    time: int = 0                       # cumulative elapsed seconds
    pour_time: Optional[int] = None     # seconds spent pouring in this stage
    label: str = ""
    water: str = ""
    detail: str = ""
    pour_type: PourType = PourType.CIRCLE
    valve_status: ValveStatus = ValveStatus.UNSET

    @field_validator("time", mode="before")
    @classmethod
    def _time_non_negative(cls, v: Any) -> int:
        return max(0, _to_int(v))

    @field_validator("pour_time", mode="before")
    @classmethod
    def _pour_time(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        return max(0, _to_int(v))

    @field_validator("label", "water", "detail", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _none_to_empty(v)

    # Unknown pour styles (including legacy "spiral") become circle.
    @field_validator("pour_type", mode="before")
    @classmethod
    def _pour_type(cls, v: Any) -> PourType:
        if isinstance(v, PourType):
            return v
        try:
            return PourType(str(v).strip().lower())
        except ValueError:
            return PourType.CIRCLE

    @field_validator("valve_status", mode="before")
    @classmethod
    def _valve_status(cls, v: Any) -> ValveStatus:
        if isinstance(v, ValveStatus):
            return v
        try:
            return ValveStatus(str(v or "").strip().lower())
        except ValueError:
            return ValveStatus.UNSET


class MethodParams(_Record):
    coffee: str = ""
    water: str = ""
    ratio: str = ""
    grind_size: str = ""
    temp: str = ""
    video_url: str = ""
    stages: List[Stage] = Field(default_factory=list)

    @field_validator("coffee", "water", "ratio", "grind_size", "temp", "video_url", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _none_to_empty(v)


class Method(_Record):
    id: str = ""
    name: str = ""
    params: MethodParams = Field(default_factory=MethodParams)


# ===================== Coffee bean =====================

class BlendComponent(_Record):
    name: Optional[str] = None
    percentage: str = "0"               # integer 0-100 kept as text
    origin: Optional[str] = None
    process: Optional[str] = None
    variety: Optional[str] = None

    @field_validator("percentage", mode="before")
    @classmethod
    def _percentage(cls, v: Any) -> str:
        if isinstance(v, str):
            v = v.strip().rstrip("%")
        if isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v):
            return str(_clamp(int(round(v)), 0, 100))
        try:
            return str(_clamp(int(round(float(v))), 0, 100))
        except (TypeError, ValueError, OverflowError):
            return "0"


class CoffeeBean(_Record):
    id: Optional[str] = None
    name: str
    roaster: Optional[str] = None
    roast_level: str = "浅度烘焙"
    roast_date: Optional[str] = None
    origin: Optional[str] = None
    process: Optional[str] = None
    variety: Optional[str] = None
    type: Optional[str] = None
    price: Optional[str] = None
    capacity: Optional[str] = None
    remaining: Optional[str] = None
    flavor: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    blend_components: List[BlendComponent] = Field(default_factory=list)
    start_day: Optional[int] = None     # 养豆期 (days)
    end_day: Optional[int] = None       # 赏味期 (days)
    favorite: Optional[bool] = None
    timestamp: Optional[int] = None

    @field_validator("roast_level", mode="before")
    @classmethod
    def _roast_level(cls, v: Any) -> Any:
        return v if v not in (None, "") else "浅度烘焙"

    # Flavor tags behave like a set but keep first-seen order.
    @field_validator("flavor", mode="before")
    @classmethod
    def _flavor(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        out, seen = [], set()
        for t in v:
            s = str(t).strip() if t is not None else ""
            if s and s not in seen:
                seen.add(s)
                out.append(s)
        return out

    @field_validator("blend_components", mode="before")
    @classmethod
    def _blend(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [c for c in v if isinstance(c, (dict, BlendComponent))]

    @field_validator("start_day", "end_day", mode="before")
    @classmethod
    def _days(cls, v: Any) -> Optional[int]:
        if v in (None, ""):
            return None
        return max(0, _to_int(v))

    @model_validator(mode="after")
    def _remaining_defaults_to_capacity(self) -> "CoffeeBean":
        if not self.remaining and self.capacity:
            self.remaining = self.capacity
        return self


class CoffeeBeanInfo(_Record):
    name: str = ""
    roast_level: str = ""
    roast_date: Optional[str] = None

    @field_validator("name", "roast_level", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _none_to_empty(v)


# ===================== Brewing note =====================

class NoteParams(_Record):
    coffee: str = ""
    water: str = ""
    ratio: str = ""
    grind_size: str = ""
    temp: str = ""

    @field_validator("coffee", "water", "ratio", "grind_size", "temp", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _none_to_empty(v)


class TasteScores(_Record):
    acidity: int = 0
    sweetness: int = 0
    bitterness: int = 0
    body: int = 0

    @field_validator("acidity", "sweetness", "bitterness", "body", mode="before")
    @classmethod
    def _score(cls, v: Any) -> int:
        return _clamp(_to_int(v), 0, 5)


class BrewingNote(_Record):
    id: str = ""
    bean_id: str = ""
    method_id: str = ""
    method_name: str = ""
    method: Optional[str] = None
    equipment: str = ""
    coffee_bean_info: Optional[CoffeeBeanInfo] = None
    params: NoteParams = Field(default_factory=NoteParams)
    taste: TasteScores = Field(default_factory=TasteScores)
    rating: int = 0
    notes: str = ""
    brew_time: Optional[str] = None
    timestamp: int = 0

    @field_validator("id", "bean_id", "method_id", "method_name", "equipment", "notes", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return _none_to_empty(v)

    @field_validator("rating", mode="before")
    @classmethod
    def _rating(cls, v: Any) -> int:
        return _clamp(_to_int(v), 0, 5)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, v: Any) -> int:
        return max(0, _to_int(v))


Record = Union[Method, CoffeeBean, BrewingNote]


# ===================== HTTP payloads =====================

class TextIn(BaseModel):
    text: str

class ImportOut(BaseModel):
    ok: bool
    kind: Optional[RecordKind] = None
    record: Optional[dict] = None

class TextOut(BaseModel):
    ok: bool = True
    text: str
