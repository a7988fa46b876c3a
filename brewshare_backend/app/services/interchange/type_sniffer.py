# brewshare_backend/app/services/interchange/type_sniffer.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from brewshare_backend.app.schemas import RecordKind
from brewshare_backend.app.utils.logs import get_logger, preview
from brewshare_backend.app.utils.strings import normalize_text
from .formats import BEAN_HEADER, METHOD_HEADER, NOTE_HEADER
from .json_sanitizer import clean_json_string, try_parse_json

log = get_logger("interchange.sniffer")


class Classification(str, Enum):
    EXPLICIT_METHOD_TEXT = "explicit_method_text"
    EXPLICIT_BEAN_TEXT = "explicit_bean_text"
    EXPLICIT_NOTE_TEXT = "explicit_note_text"
    JSON = "json"
    AMBIGUOUS_TEXT = "ambiguous_text"
    UNRECOGNIZED = "unrecognized"


@dataclass
class SniffResult:
    classification: Classification
    kind: Optional[RecordKind] = None       # set for explicit and ambiguous text
    payload: Optional[Dict[str, Any]] = None  # parsed JSON object
    cleaned: str = ""


# Header tag -> (classification, kind); checked against the trimmed text.
EXPLICIT_HEADERS: Tuple[Tuple[str, Classification, RecordKind], ...] = (
    (METHOD_HEADER, Classification.EXPLICIT_METHOD_TEXT, RecordKind.METHOD),
    (BEAN_HEADER, Classification.EXPLICIT_BEAN_TEXT, RecordKind.BEAN),
    (NOTE_HEADER, Classification.EXPLICIT_NOTE_TEXT, RecordKind.NOTE),
)

# Purpose:
# Content keywords for text without a header tag. Each rule is a tuple of
# keywords that must ALL appear; a category matches when ANY rule matches.
# Categories are tried in order, first match wins.
KEYWORD_RULES: Tuple[Tuple[RecordKind, Tuple[Tuple[str, ...], ...]], ...] = (
    (RecordKind.NOTE, (
        ("冲煮记录",), ("设备:",), ("方法:",), ("咖啡豆:",), ("参数设置:",), ("风味评分:",),
    )),
    (RecordKind.BEAN, (
        ("咖啡豆",), ("烘焙度:",), ("产地:", "处理法:"), ("风味标签:",),
    )),
    (RecordKind.METHOD, (
        ("冲煮方案",), ("步骤 1:",), ("冲煮步骤",), ("分钟",), ("咖啡粉量:", "水量:", "水温:"),
    )),
)


def keyword_kind(text: str) -> Optional[RecordKind]:
    t = (text or "").replace("：", ":")
    for kind, rules in KEYWORD_RULES:
        if any(all(k in t for k in rule) for rule in rules):
            return kind
    return None


def classify(text: str) -> SniffResult:
    """
    Decide what a pasted blob is, without decoding it:
      1) explicit header tag -> explicit text kind (JSON is never tried)
      2) sanitised text parses as a JSON object -> JSON (payload attached)
      3) keyword heuristics -> ambiguous text with a guessed kind
      4) otherwise unrecognized
    """
    original = normalize_text(text).strip()
    for header, classification, kind in EXPLICIT_HEADERS:
        if original.startswith(header):
            log.debug("explicit %s text", kind.value)
            return SniffResult(classification, kind=kind, cleaned=original)

    cleaned = clean_json_string(original)
    data = try_parse_json(cleaned)
    if isinstance(data, dict):
        return SniffResult(Classification.JSON, payload=data, cleaned=cleaned)

    kind = keyword_kind(cleaned)
    if kind is not None:
        log.info("no header tag; keywords suggest %s text", kind.value)
        return SniffResult(Classification.AMBIGUOUS_TEXT, kind=kind, cleaned=cleaned)

    log.info("unrecognized input: %r", preview(original))
    return SniffResult(Classification.UNRECOGNIZED, cleaned=cleaned)
