# brewshare_backend/app/services/interchange/json_sanitizer.py
from __future__ import annotations

import json
from typing import Any, Optional

from brewshare_backend.app.utils.logs import get_logger

log = get_logger("interchange.sanitizer")

FENCE = "```"


def _parses(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def try_parse_json(text: str) -> Optional[Any]:
    """json.loads that answers None instead of raising."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _strip_fences(text: str) -> str:
    # Repeat so ```json ```json {...} ``` ``` unwraps fully (keeps cleaning idempotent).
    while len(text) >= 2 * len(FENCE) and text.startswith(FENCE) and text.endswith(FENCE):
        inner = text[len(FENCE):-len(FENCE)]
        if inner[:4].lower() == "json":
            inner = inner[4:]
        text = inner.strip()
    return text


def clean_json_string(text: str) -> str:
    """
    Recover a parseable JSON document from pasted text.

    - trims whitespace and markdown code fences (optionally tagged `json`)
    - if that still does not parse, keeps the span from the first "{" to the
      last "}" when that span parses on its own (JSON wrapped in prose)
    - otherwise returns the fence-stripped text unchanged

    Never raises; callers still do their own parse.
    """
    cleaned = _strip_fences((text or "").strip())
    if _parses(cleaned):
        return cleaned

    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first >= 0 and last > first:
        candidate = cleaned[first:last + 1]
        if _parses(candidate):
            log.debug("recovered JSON object from surrounding text (%d chars dropped)",
                      len(cleaned) - len(candidate))
            return candidate
        log.debug("brace-bounded span is not valid JSON; leaving text as is")
    return cleaned


_STAGE_KEYS = ("time", "pourTime", "label", "water", "detail", "pourType", "valveStatus")
_PARAM_KEYS = ("coffee", "water", "ratio", "grindSize", "temp")


def clean_json_for_optimization(json_text: str) -> str:
    """
    Reduce an optimisation payload to the fields the optimisation workflow
    reads. Input that does not parse as a JSON object is returned unchanged.
    """
    data = try_parse_json(json_text)
    if not isinstance(data, dict):
        return json_text

    params = data.get("params") if isinstance(data.get("params"), dict) else {}
    stages = params.get("stages")
    cleaned_params = {k: params.get(k) for k in _PARAM_KEYS}
    cleaned_params["stages"] = (
        [{k: s.get(k) for k in _STAGE_KEYS} for s in stages if isinstance(s, dict)]
        if isinstance(stages, list) else None
    )

    cleaned = {
        "equipment": data.get("equipment"),
        "method": data.get("method"),
        "params": cleaned_params,
        "currentTaste": data.get("currentTaste"),
        "idealTaste": data.get("idealTaste"),
        "notes": data.get("notes"),
        "optimizationGoal": data.get("optimizationGoal"),
    }
    return json.dumps(cleaned, ensure_ascii=False, indent=2)
