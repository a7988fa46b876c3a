# brewshare_backend/app/services/interchange/field_extractor.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from brewshare_backend.app.utils.strings import meaningful
from .formats import SECTION_BREAK, TAG_PREFIX

# Purpose:
# Labeled-line extraction shared by the three text codecs.
# A labeled line looks like "<label>: <value>" (ASCII or full-width colon,
# optional leading indentation). Everything here is a plain line scan, no
# multi-line regexes, so hostile input costs linear time.

COLONS = (":", "：")
SECTION_STOPS = (SECTION_BREAK, TAG_PREFIX)

Transform = Callable[[str], Any]


def _identity(v: str) -> str:
    return v


@dataclass(frozen=True)
class FieldSpec:
    """One row of a label table: where to look, where to put it, how to convert."""
    label: str
    field: str
    transform: Transform = _identity


def _after_label(line: str, label: str) -> Optional[str]:
    s = line.strip()
    if not s.startswith(label):
        return None
    rest = s[len(label):].lstrip(" \t")
    if not rest or rest[0] not in COLONS:
        return None
    return rest[1:].strip()


def extract_field(text: str, label: str) -> Optional[str]:
    """
    Return the trimmed value of the first "<label>: value" line, or None.
    Empty values and the "not set" sentinels count as absent.
    """
    for line in (text or "").split("\n"):
        value = _after_label(line, label)
        if value is not None:
            return meaningful(value)
    return None


def extract_fields(text: str, specs: Iterable[FieldSpec]) -> Dict[str, Any]:
    """
    Apply a label table to `text`. A transform returning None (or raising
    ValueError or OverflowError) leaves the field out, so a bad value never
    sinks the record.
    """
    out: Dict[str, Any] = {}
    for spec in specs:
        raw = extract_field(text, spec.label)
        if raw is None:
            continue
        try:
            value = spec.transform(raw)
        except (ValueError, OverflowError):
            continue
        if value is not None:
            out[spec.field] = value
    return out


def has_label(text: str, label: str) -> bool:
    return any(_after_label(line, label) is not None for line in (text or "").split("\n"))


def section_lines(text: str, header: str, stops: Iterable[str] = SECTION_STOPS) -> Optional[List[str]]:
    """
    Lines following the "<header>:" marker up to the next section delimiter
    (a "---" line or a hidden tag). Text after the colon on the header line
    itself counts as the first line. Returns None when the header is absent.
    """
    stops = tuple(stops)
    lines = (text or "").split("\n")
    for i, line in enumerate(lines):
        value = _after_label(line, header)
        if value is None:
            continue
        body: List[str] = [value] if value else []
        for nxt in lines[i + 1:]:
            if any(nxt.strip().startswith(stop) for stop in stops):
                break
            body.append(nxt)
        return body
    return None


# ---- Value transforms ----

def leading_number(value: str) -> Optional[str]:
    """ "200g" -> "200", "12.5元" -> "12.5", "g" -> None """
    s = value.strip()
    end = 0
    seen_dot = False
    while end < len(s) and (s[end] in "0123456789" or (s[end] == "." and not seen_dot)):
        seen_dot = seen_dot or s[end] == "."
        end += 1
    num = s[:end].rstrip(".")
    return num or None


def leading_int(value: str) -> Optional[int]:
    num = leading_number(value)
    if num is None:
        return None
    return int(num.split(".")[0])


def score_out_of_five(value: str) -> Optional[int]:
    """ "4/5" -> 4; anything unparsable -> None """
    head, sep, tail = value.partition("/")
    if not sep or tail.strip() != "5":
        return None
    n = leading_int(head)
    return None if n is None else max(0, min(5, n))


def split_tags(value: str) -> List[str]:
    for sep in ("，", "、"):
        value = value.replace(sep, ",")
    return [t.strip() for t in value.split(",") if t.strip()]


def header_value(text: str, header: str) -> Optional[str]:
    """Rest of the first line carrying `header` (e.g. "【咖啡豆】Name" -> "Name")."""
    for line in (text or "").split("\n"):
        idx = line.find(header)
        if idx >= 0:
            return line[idx + len(header):].strip() or None
    return None


def non_blank(lines: Iterable[str]) -> List[str]:
    return [ln for ln in lines if ln.strip()]
