# brewshare_backend/app/services/interchange/method_text.py
from __future__ import annotations

import math
import re
from datetime import date
from typing import List, Optional, Tuple

from brewshare_backend.app.schemas import Method, MethodParams, PourType, Stage, ValveStatus
from brewshare_backend.app.utils.ids import new_record_id
from brewshare_backend.app.utils.logs import get_logger
from brewshare_backend.app.utils.strings import normalize_text
from .errors import EmptyStagesError
from .field_extractor import (
    FieldSpec, extract_fields, header_value, non_blank, section_lines, SECTION_STOPS,
)
from .formats import (
    METHOD_HEADER, METHOD_ID_TAG, METHOD_TAG, NOT_SET, PARAM_LABELS, POUR_TYPE_LABELS,
    SECTION_BREAK, SHARE_TRAILER, STAGES_SECTION, VALVE_LABELS,
)

log = get_logger("interchange.method_text")

PARAM_SPECS = tuple(FieldSpec(label, field) for field, label in PARAM_LABELS.items())

# Purpose:
# Stage line grammar, consumed left to right with small anchored patterns:
#   <n>. [<m>分<s>秒] (注水<p>秒)? (阀门开启|阀门关闭)? [<pour label>]? <label> - <water>
_STAGE_HEAD = re.compile(r"\s*\d+\s*[.．、]\s*\[\s*(\d{1,6})\s*分\s*(\d{1,6})\s*秒\s*\]")
_POUR_TIME = re.compile(r"\s*[(（]\s*注水\s*(\d{1,6})\s*秒\s*[)）]")
_VALVE = re.compile(r"\s*[(（]\s*(阀门开启|阀门关闭)\s*[)）]")
_BRACKET = re.compile(r"\s*\[([^\]\n]*)\]")

_VALVE_BY_LABEL = {label: status for status, label in VALVE_LABELS.items()}

CONTINUATION_INDENT = (" ", "\t", "\u3000")


def default_pour_time(time_s: int) -> int:
    return min(20, math.ceil(time_s * 0.25))


# What it does:
# Map the bracketed pour label ("[中心注水]" or a raw id like "[center]") to a PourType.
def pour_type_from_label(text: str) -> PourType:
    t = (text or "").strip()
    for kind in (PourType.CENTER, PourType.ICE, PourType.OTHER):
        if POUR_TYPE_LABELS[kind] in t or t.lower() == kind.value:
            return kind
    return PourType.CIRCLE


def _split_label_water(body: str) -> Tuple[str, str]:
    body = body.strip()
    if body.endswith("-"):
        return body[:-1].strip(), ""
    if " - " in body:
        label, _, water = body.partition(" - ")
    elif "-" in body:
        label, _, water = body.rpartition("-")
    else:
        label, water = body, ""
    return label.strip(), water.strip()


def parse_stage_line(line: str) -> Optional[Stage]:
    """Parse one primary stage line; None when the line is not a stage."""
    m = _STAGE_HEAD.match(line)
    if not m:
        return None
    time_s = int(m.group(1)) * 60 + int(m.group(2))
    rest = line[m.end():]

    pour_time = None
    pm = _POUR_TIME.match(rest)
    if pm:
        pour_time = int(pm.group(1))
        rest = rest[pm.end():]

    valve = ValveStatus.UNSET
    vm = _VALVE.match(rest)
    if vm:
        valve = _VALVE_BY_LABEL[vm.group(1)]
        rest = rest[vm.end():]

    pour_type = PourType.CIRCLE
    bm = _BRACKET.match(rest)
    if bm:
        pour_type = pour_type_from_label(bm.group(1))
        rest = rest[bm.end():]

    label, water = _split_label_water(rest)
    return Stage(
        time=time_s,
        pour_time=pour_time if pour_time is not None else default_pour_time(time_s),
        label=label,
        water=water,
        pour_type=pour_type,
        valve_status=valve,
    )


def _is_continuation(line: str) -> bool:
    return line.startswith(CONTINUATION_INDENT) and parse_stage_line(line) is None


def parse_stages(lines: List[str]) -> List[Stage]:
    """
    Two-line state machine: a primary stage line, optionally followed by an
    indented detail line that belongs to it. Order is kept as written.
    """
    stages: List[Stage] = []
    lines = non_blank(lines)
    i = 0
    while i < len(lines):
        stage = parse_stage_line(lines[i])
        i += 1
        if stage is None:
            continue
        if i < len(lines) and _is_continuation(lines[i]):
            stage = stage.model_copy(update={"detail": lines[i].strip()})
            i += 1
        stages.append(stage)
    return stages


def _stage_block(text: str) -> List[str]:
    block = section_lines(text, STAGES_SECTION)
    if block is not None:
        return block
    # No "冲煮步骤:" marker (hand-written text): scan everything up to the trailer.
    out: List[str] = []
    for line in text.split("\n"):
        if line.strip().startswith(SECTION_STOPS):
            break
        out.append(line)
    return out


def _embedded_id(text: str) -> Optional[str]:
    start = text.find(METHOD_ID_TAG)
    if start < 0:
        return None
    start += len(METHOD_ID_TAG)
    end = text.find("@", start)
    if end < 0:
        return None
    rid = text[start:end].strip()
    if rid and all(ch.isascii() and (ch.isalnum() or ch in "-_") for ch in rid):
        return rid
    return None


def decode_method_text(text: str) -> Method:
    """
    Parse a shared method text. Params stay empty when absent or "未设置";
    text import never substitutes defaults. Raises EmptyStagesError when no
    stage line could be read.
    """
    text = normalize_text(text).strip()
    name = header_value(text, METHOD_HEADER)
    params = extract_fields(text, PARAM_SPECS)
    stages = parse_stages(_stage_block(text))
    if not stages:
        raise EmptyStagesError(f"method text {(name or '')!r} has no readable stage lines")

    if not name:
        name = f"导入方案 {date.today().isoformat()}"
        log.info("method text had no name; using %r", name)

    return Method(
        id=_embedded_id(text) or new_record_id("method"),
        name=name,
        params=MethodParams(**params, stages=stages),
    )


# ---------------------- Encode ----------------------

def format_stage_line(n: int, stage: Stage) -> str:
    parts = [f"{n}. [{stage.time // 60}分{stage.time % 60}秒]"]
    if stage.pour_time:
        parts.append(f"(注水{stage.pour_time}秒)")
    if stage.valve_status in VALVE_LABELS:
        parts.append(f"({VALVE_LABELS[stage.valve_status]})")
    parts.append(f"[{POUR_TYPE_LABELS[stage.pour_type]}]")
    parts.append(f"{_one_line(stage.label)} - {_one_line(stage.water)}")
    return " ".join(parts)


def _one_line(s: str) -> str:
    return " ".join((s or "").split())


def method_to_readable_text(method: Method) -> str:
    params = method.params
    lines = [f"{METHOD_HEADER}{method.name}", ""]
    for field, label in PARAM_LABELS.items():
        lines.append(f"{label}: {getattr(params, field) or NOT_SET}")
    lines.append("")

    if params.stages:
        lines += [f"{STAGES_SECTION}:", ""]
        for n, stage in enumerate(params.stages, 1):
            lines.append(format_stage_line(n, stage))
            if stage.detail:
                lines.append(f"   {_one_line(stage.detail)}")
            lines.append("")

    lines += [SECTION_BREAK, SHARE_TRAILER, "", METHOD_TAG]
    return "\n".join(lines)
