# brewshare_backend/app/services/interchange/bean_text.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from brewshare_backend.app.schemas import BlendComponent, CoffeeBean
from brewshare_backend.app.utils.ids import new_record_id
from brewshare_backend.app.utils.strings import normalize_text
from .errors import MissingFieldError
from .field_extractor import (
    FieldSpec, extract_field, extract_fields, header_value, leading_int, leading_number,
    section_lines, split_tags,
)
from .formats import (
    BEAN_HEADER, BEAN_LABELS, BEAN_TAG, BLEND_SECTION, REMAINING_MARK, SECTION_BREAK,
    SHARE_TRAILER, UNKNOWN,
)

# Label table: (label, field, transform). Capacity/remaining are handled apart
# because the two numbers can share one line.
BEAN_SPECS = (
    FieldSpec(BEAN_LABELS["roast_level"], "roast_level"),
    FieldSpec(BEAN_LABELS["roast_date"], "roast_date"),
    FieldSpec(BEAN_LABELS["roaster"], "roaster"),
    FieldSpec(BEAN_LABELS["origin"], "origin"),
    FieldSpec(BEAN_LABELS["process"], "process"),
    FieldSpec(BEAN_LABELS["variety"], "variety"),
    FieldSpec(BEAN_LABELS["type"], "type"),
    FieldSpec(BEAN_LABELS["price"], "price", leading_number),
    FieldSpec(BEAN_LABELS["start_day"], "start_day", leading_int),
    FieldSpec(BEAN_LABELS["end_day"], "end_day", leading_int),
    FieldSpec(BEAN_LABELS["flavor"], "flavor", split_tags),
    FieldSpec(BEAN_LABELS["notes"], "notes"),
)

# Fallback name label for hand-written text without the header tag.
NAME_LABEL = "名称"

_COMPONENT_NUM = re.compile(r"\s*\d+\s*[.．、]\s*")
# "50% 哥伦比亚 | 水洗 | 卡杜拉"
_LEGACY_COMPONENT = re.compile(r"(\d+(?:\.\d+)?)\s*%\s*(.*)")
# "Sidama (60%) | 埃塞俄比亚 | 日晒 | 74110"
_NAMED_COMPONENT = re.compile(r"([^(（|]*?)\s*[(（]\s*(\d+(?:\.\d+)?)\s*%\s*[)）]\s*(.*)")

# "剩余150g", weight unit required
_REMAINING = re.compile(REMAINING_MARK + r"\s*[:：]?\s*(\d{1,9}(?:\.\d+)?)\s*[gG克]")

_DETAIL_FIELDS = ("origin", "process", "variety")


def _details(text: str, leading_sep: bool = False) -> Dict[str, str]:
    text = text.strip()
    if leading_sep and text.startswith("|"):
        text = text[1:]
    parts = [p.strip() for p in text.split("|")]
    return {f: v for f, v in zip(_DETAIL_FIELDS, parts) if v}


def parse_component_line(line: str) -> Optional[BlendComponent]:
    """One numbered blend line -> component; None for anything malformed."""
    m = _COMPONENT_NUM.match(line)
    if not m:
        return None
    rest = line[m.end():].strip()

    named = _NAMED_COMPONENT.match(rest)
    if named:
        name = named.group(1).strip() or None
        return BlendComponent(name=name, percentage=named.group(2), **_details(named.group(3), leading_sep=True))

    legacy = _LEGACY_COMPONENT.match(rest)
    if legacy:
        return BlendComponent(percentage=legacy.group(1), **_details(legacy.group(2)))
    return None


def _capacity(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    value = extract_field(text, BEAN_LABELS["capacity"])
    if value:
        left, sep, right = value.partition("/")
        if sep and leading_number(right):
            # "容量: 150/200g" -> remaining/capacity
            out["capacity"] = leading_number(right)
            if leading_number(left):
                out["remaining"] = leading_number(left)
        elif leading_number(value):
            out["capacity"] = leading_number(value)
        m = _REMAINING.search(value)
        if m and "remaining" not in out:
            out["remaining"] = m.group(1)

    # Only a line that starts with "剩余" counts; notes mentioning it do not.
    if "remaining" not in out:
        for line in text.split("\n"):
            m = _REMAINING.match(line.strip())
            if m:
                out["remaining"] = m.group(1)
                break
    return out


def decode_bean_text(text: str) -> CoffeeBean:
    """
    Parse a shared coffee-bean text. Only the name is required; everything
    else is picked up when its label is present and readable.
    """
    text = normalize_text(text).strip()
    name = header_value(text, BEAN_HEADER) or extract_field(text, NAME_LABEL)
    if not name:
        raise MissingFieldError("coffee bean text has no name")

    data: Dict[str, Any] = {"id": new_record_id(), "name": name}
    data.update(_capacity(text))
    data.update(extract_fields(text, BEAN_SPECS))

    block = section_lines(text, BLEND_SECTION)
    if block is not None:
        components: List[BlendComponent] = []
        for line in block:
            comp = parse_component_line(line)
            if comp is not None:
                components.append(comp)
        data["blend_components"] = components

    return CoffeeBean(**data)


# ---------------------- Encode ----------------------

def format_component_line(n: int, comp: BlendComponent) -> str:
    details = [comp.origin or "", comp.process or "", comp.variety or ""]
    tail = " | ".join(details).rstrip(" |")
    if comp.name:
        return f"  {n}. {comp.name} ({comp.percentage}%)" + (f" | {tail}" if tail else "")
    return f"  {n}. {comp.percentage}% {tail}".rstrip()


def bean_to_readable_text(bean: CoffeeBean) -> str:
    lines = [f"{BEAN_HEADER}{bean.name}"]
    if bean.capacity:
        cap = f"{BEAN_LABELS['capacity']}: {bean.capacity}g"
        if bean.remaining and bean.remaining != bean.capacity:
            cap += f" ({REMAINING_MARK}{bean.remaining}g)"
        lines.append(cap)
    lines.append(f"{BEAN_LABELS['roast_level']}: {bean.roast_level or UNKNOWN}")

    for field in ("roast_date", "roaster", "origin", "process", "variety", "type"):
        value = getattr(bean, field)
        if value:
            lines.append(f"{BEAN_LABELS[field]}: {value}")
    if bean.price:
        lines.append(f"{BEAN_LABELS['price']}: {bean.price}元")
    if bean.start_day is not None:
        lines.append(f"{BEAN_LABELS['start_day']}: {bean.start_day}天")
    if bean.end_day is not None:
        lines.append(f"{BEAN_LABELS['end_day']}: {bean.end_day}天")
    if bean.flavor:
        lines.append(f"{BEAN_LABELS['flavor']}: {', '.join(bean.flavor)}")

    if bean.blend_components:
        lines += ["", f"{BLEND_SECTION}:"]
        lines += [format_component_line(n, c) for n, c in enumerate(bean.blend_components, 1)]

    if bean.notes:
        lines += ["", f"{BEAN_LABELS['notes']}: {' '.join(bean.notes.split())}"]

    lines += ["", SECTION_BREAK, SHARE_TRAILER, "", BEAN_TAG]
    return "\n".join(lines)
