# brewshare_backend/app/services/interchange/json_codec.py
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from brewshare_backend.app.schemas import (
    BrewingNote, CoffeeBean, Method, MethodParams, Record, RecordKind, Stage,
)
from brewshare_backend.app.utils.ids import new_record_id, now_ms
from brewshare_backend.app.utils.logs import get_logger
from .errors import (
    DecodeResult, EmptyStagesError, InterchangeError, MalformedJsonError,
    MissingFieldError, UnrecognizedError,
)
from .json_sanitizer import clean_json_string, try_parse_json

log = get_logger("interchange.json")

# Purpose:
# Defaults applied per missing field on JSON import, so a half-filled recipe
# from an assistant is still importable. Text import never applies these.
DEFAULT_METHOD_PARAMS: Dict[str, str] = {
    "coffee": "15g",
    "water": "225g",
    "ratio": "1:15",
    "grindSize": "中细",
    "temp": "92°C",
    "videoUrl": "",
}
OPTIMIZED_SUFFIX = "优化方案"

# Keys an assistant sometimes puts at the top level instead of under params.
_PROMOTABLE_PARAM_KEYS = ("stages", "coffee", "water", "ratio", "grindSize", "temp", "videoUrl")


def _as_dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}

def _text(v: Any) -> str:
    if v is None or isinstance(v, (dict, list)):
        return ""
    return str(v).strip()

def _stages_of(payload: Dict[str, Any]) -> Any:
    return _as_dict(payload.get("params")).get("stages")


# ---------------------- AI-variant normalization ----------------------

def normalize_ai_variant(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Promote fields an assistant put at the wrong nesting level:
      - top-level stages/coffee/water/... -> params.*
      - coffeeBeanInfo.method / coffeeBeanInfo.equipment -> top level
    Canonical payloads keep their values. The input dict is not modified.
    """
    data = dict(payload)
    params = dict(_as_dict(data.get("params")))
    for key in _PROMOTABLE_PARAM_KEYS:
        if key in data and params.get(key) in (None, "", []):
            params[key] = data.pop(key)
    data["params"] = params

    info = _as_dict(data.get("coffeeBeanInfo"))
    for key in ("method", "equipment"):
        if not _text(data.get(key)) and _text(info.get(key)):
            data[key] = info[key]
    return data


def is_ai_variant(payload: Dict[str, Any]) -> bool:
    has_anchor = "method" in payload or "coffeeBeanInfo" in payload
    stages = _stages_of(payload)
    if stages is None:
        stages = payload.get("stages")
    return has_anchor and isinstance(stages, list)


# ---------------------- Decoders ----------------------

def _decode_stages(raw: Any) -> List[Stage]:
    stages: List[Stage] = []
    if not isinstance(raw, list):
        return stages
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            log.debug("stage %d is not an object; skipped", i)
            continue
        try:
            stages.append(Stage.model_validate(item))
        except ValidationError as e:
            log.warning("stage %d dropped: %d invalid field(s)", i, e.error_count())
    return stages


def decode_method(payload: Dict[str, Any]) -> Method:
    """
    Build a Method from a (possibly AI-shaped) JSON object.
    Raises MissingFieldError (no name and no equipment) or EmptyStagesError.
    A new id is always generated so imports never overwrite stored recipes.
    """
    data = normalize_ai_variant(payload)
    info = _as_dict(data.get("coffeeBeanInfo"))
    equipment = _text(data.get("equipment"))

    name = _text(data.get("method")) or _text(info.get("method"))
    if not name:
        if not equipment:
            raise MissingFieldError("imported JSON has no method name and no equipment")
        name = f"{equipment}{OPTIMIZED_SUFFIX}"

    raw_params = _as_dict(data.get("params"))
    params = {key: _text(raw_params.get(key)) or default for key, default in DEFAULT_METHOD_PARAMS.items()}

    stages = _decode_stages(raw_params.get("stages"))
    if not stages:
        raise EmptyStagesError(f"method {name!r} has no brewing stages")

    return Method(
        id=new_record_id(),
        name=name,
        params=MethodParams.model_validate({**params, "stages": stages}),
    )


def decode_bean(payload: Dict[str, Any]) -> CoffeeBean:
    data = dict(payload)
    legacy = data.pop("processingMethod", None)
    if legacy and not _text(data.get("process")):
        data["process"] = legacy
    name = _text(data.get("name"))
    if not name:
        raise MissingFieldError("coffee bean has no name")
    data["name"] = name
    if not _text(data.get("id")):
        data["id"] = new_record_id()
    return CoffeeBean.model_validate(data)


def decode_note(payload: Dict[str, Any]) -> BrewingNote:
    data = {k: v for k, v in payload.items() if v is not None}
    # Nested blocks that are not objects fall back to their defaults.
    for key in ("params", "taste", "coffeeBeanInfo"):
        if key in data and not isinstance(data[key], dict):
            data.pop(key)
    if not _text(data.get("id")):
        data["id"] = new_record_id("note")
    if not data.get("timestamp"):
        data["timestamp"] = now_ms()
    return BrewingNote.model_validate(data)


# ---------------------- Tagged-union decode ----------------------

Predicate = Callable[[Dict[str, Any]], bool]
Decoder = Callable[[Dict[str, Any]], Record]

def _has_stages(p: Dict[str, Any]) -> bool:
    stages = _stages_of(p)
    return isinstance(stages, list) and len(stages) > 0

def _looks_like_bean(p: Dict[str, Any]) -> bool:
    return "roastLevel" in p or "processingMethod" in p

def _looks_like_note(p: Dict[str, Any]) -> bool:
    return "beanId" in p and "methodId" in p

# Priority order; the first predicate that holds picks the decoder.
JSON_CANDIDATES: Tuple[Tuple[RecordKind, Predicate, Decoder], ...] = (
    (RecordKind.METHOD, _has_stages, decode_method),
    (RecordKind.BEAN, _looks_like_bean, decode_bean),
    (RecordKind.NOTE, _looks_like_note, decode_note),
    (RecordKind.METHOD, is_ai_variant, decode_method),
)

# Field vocabularies used when no predicate holds.
KIND_FIELDS: Dict[RecordKind, frozenset] = {
    RecordKind.METHOD: frozenset({"method", "params", "equipment", "stages", "coffee", "water",
                                  "ratio", "grindSize", "temp", "videoUrl"}),
    RecordKind.BEAN: frozenset({"name", "roastLevel", "roastDate", "origin", "process", "variety",
                                "flavor", "capacity", "remaining", "price", "type", "roaster",
                                "blendComponents"}),
    RecordKind.NOTE: frozenset({"beanId", "methodId", "methodName", "taste", "rating",
                                "brewTime", "timestamp", "coffeeBeanInfo"}),
}
_DECODERS: Dict[RecordKind, Decoder] = {
    RecordKind.METHOD: decode_method,
    RecordKind.BEAN: decode_bean,
    RecordKind.NOTE: decode_note,
}


def best_matching_kinds(payload: Dict[str, Any]) -> List[RecordKind]:
    """Kinds sharing at least one key with the payload, most overlap first."""
    keys = set(payload)
    order = list(KIND_FIELDS)
    scored = [(len(keys & KIND_FIELDS[k]), -order.index(k), k) for k in order]
    return [k for score, _, k in sorted(scored, reverse=True) if score > 0]


def decode_json_record(payload: Dict[str, Any]) -> Record:
    """
    Decode a parsed JSON object into one of the three record kinds.
    Raises InterchangeError subclasses (or pydantic ValidationError) when the
    chosen kind cannot be built.
    """
    for kind, predicate, decoder in JSON_CANDIDATES:
        if predicate(payload):
            log.debug("JSON shape matched %s", kind.value)
            return decoder(payload)

    # Lenient pass: maybe a recipe after all, else whatever it resembles most.
    try:
        return decode_method(payload)
    except InterchangeError as e:
        log.debug("lenient method decode failed: %s", e)

    for kind in best_matching_kinds(payload):
        if kind is RecordKind.METHOD:
            continue
        try:
            return _DECODERS[kind](payload)
        except (InterchangeError, ValidationError) as e:
            log.debug("fallback %s decode failed: %s", kind.value, e)
    raise UnrecognizedError(f"JSON object with keys {sorted(payload)[:8]} matches no record kind")


def parse_method_from_json(text: str) -> DecodeResult:
    """Sanitize + decode a method, reporting failure as a result instead of raising."""
    data = try_parse_json(clean_json_string(text))
    if not isinstance(data, dict):
        return DecodeResult.failure(MalformedJsonError("input is not a JSON object"))
    try:
        return DecodeResult.success(decode_method(data))
    except InterchangeError as e:
        log.warning("method JSON rejected (%s): %s", e.kind, e.message)
        return DecodeResult.failure(e)


# ---------------------- Encoders ----------------------

def _dump(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True, mode="json", exclude_none=True)
    if isinstance(obj, dict):
        return dict(obj)
    if isinstance(obj, (list, tuple)):
        return [_dump(x) for x in obj]
    return obj

def _dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2)

def _param_fields(params: Any) -> Dict[str, Any]:
    p = _as_dict(_dump(params))
    return {k: p.get(k, "") for k in ("coffee", "water", "ratio", "grindSize", "temp")}


def method_to_json(method: Method) -> str:
    """Minimal sharing shape: name + params + stages, no id."""
    return _dumps({
        "method": method.name,
        "params": {
            **_param_fields(method.params),
            "stages": _dump(method.params.stages),
        },
    })


def generate_optimization_json(
    equipment: str,
    method: str,
    coffee_bean_info: Any,
    params: Any,
    stages: Optional[Iterable[Any]],
    current_taste: Any,
    ideal_taste: Any,
    notes: str,
    optimization_goal: str,
) -> str:
    """Bundle a recipe with taste context for an external optimisation request."""
    return _dumps({
        "equipment": equipment,
        "method": method,
        "coffeeBeanInfo": _dump(coffee_bean_info),
        "params": {
            **_param_fields(params),
            "stages": _dump(list(stages or [])),
        },
        "currentTaste": _dump(current_taste),
        "idealTaste": _dump(ideal_taste),
        "notes": notes,
        "optimizationGoal": optimization_goal,
    })


_EXAMPLE_OPTIMIZATION = {
    "equipment": "V60",
    "method": "改良分段式一刀流",
    "coffeeBeanInfo": {"name": "", "roastLevel": "中度烘焙", "roastDate": ""},
    "params": {
        "coffee": "15g",
        "water": "225g",
        "ratio": "1:15",
        "grindSize": "中细",
        "temp": "94°C",
        "videoUrl": "",
        "stages": [
            {"time": 30, "pourTime": 15, "label": "螺旋焖蒸", "water": "45g",
             "detail": "加大注水搅拌力度，充分激活咖啡粉层", "pourType": "circle"},
            {"time": 60, "pourTime": 20, "label": "快节奏中心注水", "water": "90g",
             "detail": "高水位快速注入加速可溶性物质释放", "pourType": "center"},
            {"time": 120, "pourTime": 30, "label": "分层绕圈注水", "water": "225g",
             "detail": "分三次间隔注水控制萃取节奏", "pourType": "circle"},
        ],
    },
    "currentTaste": {"acidity": 3, "sweetness": 3, "bitterness": 3, "body": 3},
    "idealTaste": {"acidity": 4, "sweetness": 4, "bitterness": 2, "body": 4},
    "notes": "",
    "optimizationGoal": "希望增加甜度和醇度，减少苦味，保持适中的酸度",
}

def get_example_json() -> str:
    """Worked example of the optimisation payload, used in assistant prompts."""
    return _dumps(_EXAMPLE_OPTIMIZATION)


def generate_bean_template_json() -> str:
    """Empty bean record an assistant fills in when reading a bag label."""
    return _dumps({
        "id": "", "name": "", "image": "", "price": "", "capacity": "", "remaining": "",
        "roastLevel": "浅度烘焙", "roastDate": "", "flavor": [], "origin": "",
        "process": "", "variety": "", "type": "", "notes": "",
    })
