# brewshare_backend/app/services/interchange/note_text.py
from __future__ import annotations

from typing import Any, Dict

from brewshare_backend.app.schemas import BrewingNote
from brewshare_backend.app.utils.ids import new_record_id, now_ms
from brewshare_backend.app.utils.strings import normalize_text
from .field_extractor import FieldSpec, extract_fields, has_label, section_lines, score_out_of_five
from .formats import (
    NOT_SET, NOTE_HEADER, NOTE_LABELS, NOTE_TAG, NOTES_SECTION, PARAM_LABELS, PARAMS_SECTION,
    SECTION_BREAK, SHARE_TRAILER, TASTE_LABELS, TASTE_SECTION,
)

# Purpose:
# Brewing notes travel as export-only text: the bean/method links cannot be
# rebuilt from it, so "咖啡豆" comes back as free text in bean_id.

TOP_SPECS = (
    FieldSpec(NOTE_LABELS["equipment"], "equipment"),
    FieldSpec(NOTE_LABELS["method_name"], "method_name"),
    FieldSpec(NOTE_LABELS["bean"], "bean_id"),
    FieldSpec(NOTE_LABELS["rating"], "rating", score_out_of_five),
)
PARAM_SPECS = tuple(FieldSpec(label, field) for field, label in PARAM_LABELS.items())
TASTE_SPECS = tuple(FieldSpec(label, field, score_out_of_five) for field, label in TASTE_LABELS.items())


def decode_note_text(text: str) -> BrewingNote:
    text = normalize_text(text).strip()
    data: Dict[str, Any] = {"id": new_record_id("note"), "timestamp": now_ms()}
    data.update(extract_fields(text, TOP_SPECS))

    # Recipe labels only count inside a note when the params section exists.
    if has_label(text, PARAMS_SECTION):
        data["params"] = extract_fields(text, PARAM_SPECS)
    data["taste"] = extract_fields(text, TASTE_SPECS)

    block = section_lines(text, NOTES_SECTION)
    if block is not None:
        data["notes"] = "\n".join(block).strip()

    return BrewingNote(**data)


def brewing_note_to_readable_text(note: BrewingNote) -> str:
    info = note.coffee_bean_info
    lines = [
        NOTE_HEADER,
        f"{NOTE_LABELS['equipment']}: {note.equipment or NOT_SET}",
        f"{NOTE_LABELS['method_name']}: {note.method_name or note.method or NOT_SET}",
        f"{NOTE_LABELS['bean']}: {(info.name if info else '') or NOT_SET}",
        f"{NOTE_LABELS['roast_level']}: {(info.roast_level if info else '') or NOT_SET}",
        "",
        f"{PARAMS_SECTION}:",
    ]
    for field, label in PARAM_LABELS.items():
        lines.append(f"{label}: {getattr(note.params, field) or NOT_SET}")

    lines += ["", f"{TASTE_SECTION}:"]
    for field, label in TASTE_LABELS.items():
        lines.append(f"{label}: {getattr(note.taste, field)}/5")

    if note.rating:
        lines += ["", f"{NOTE_LABELS['rating']}: {note.rating}/5"]
    if note.notes:
        lines += ["", f"{NOTES_SECTION}:", note.notes.strip()]

    lines += ["", SECTION_BREAK, SHARE_TRAILER, "", NOTE_TAG]
    return "\n".join(lines)
