# brewshare_backend/app/routers/share.py
from __future__ import annotations
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from brewshare_backend.app.config import MAX_INPUT_CHARS
from brewshare_backend.app.schemas import (
    BrewingNote, CoffeeBean, ImportOut, Method, TextIn, TextOut,
)
from brewshare_backend.app.services.interchange import (
    bean_to_readable_text,
    brewing_note_to_readable_text,
    clean_json_string,
    extract_record_from_text,
    method_to_json,
    method_to_readable_text,
    parse_method_from_json,
    record_kind,
)
from brewshare_backend.app.utils.logs import get_logger

router = APIRouter(prefix="/share", tags=["share"])
log = get_logger("share")


def _guard_size(text: str) -> None:
    if len(text) > MAX_INPUT_CHARS:
        raise HTTPException(
            status_code=413,
            detail=f"input too large ({len(text)} > {MAX_INPUT_CHARS} chars)",
        )

def _dump(record: Any) -> Dict[str, Any]:
    return record.model_dump(by_alias=True, mode="json")


# What it does:
# Import any pasted blob (JSON, fenced JSON, shared text). Unrecognised input
# is a normal answer (ok=false), not an error.
@router.post("/import", response_model=ImportOut)
def import_record(body: TextIn) -> ImportOut:
    _guard_size(body.text)
    record = extract_record_from_text(body.text)
    if record is None:
        return ImportOut(ok=False)
    return ImportOut(ok=True, kind=record_kind(record), record=_dump(record))

# What it does:
# Strict method import from JSON; failures carry the error kind for the form UI.
@router.post("/method/json")
def import_method_json(body: TextIn) -> Dict[str, Any]:
    _guard_size(body.text)
    result = parse_method_from_json(body.text)
    if not result.ok:
        raise HTTPException(
            status_code=422,
            detail={"error": result.error_kind, "message": result.message},
        )
    return {"ok": True, "record": _dump(result.record)}

# What it does:
# Fence/prose cleanup only, for callers that parse the JSON themselves.
@router.post("/clean", response_model=TextOut)
def clean(body: TextIn) -> TextOut:
    _guard_size(body.text)
    return TextOut(text=clean_json_string(body.text))


# ---- Export (record -> shareable text) ----

@router.post("/export/method", response_model=TextOut)
def export_method(method: Method) -> TextOut:
    return TextOut(text=method_to_readable_text(method))

@router.post("/export/method/json")
def export_method_json(method: Method) -> Dict[str, Any]:
    return {"ok": True, "json": method_to_json(method)}

@router.post("/export/bean", response_model=TextOut)
def export_bean(bean: CoffeeBean) -> TextOut:
    return TextOut(text=bean_to_readable_text(bean))

@router.post("/export/note", response_model=TextOut)
def export_note(note: BrewingNote) -> TextOut:
    return TextOut(text=brewing_note_to_readable_text(note))
