# brewshare_backend/app/services/interchange/converter.py
from __future__ import annotations

from typing import Callable, Dict, Optional

from pydantic import ValidationError

from brewshare_backend.app.schemas import BrewingNote, CoffeeBean, Method, Record, RecordKind
from brewshare_backend.app.utils.logs import get_logger, preview
from .bean_text import decode_bean_text
from .errors import InterchangeError
from .json_codec import decode_json_record
from .method_text import decode_method_text
from .note_text import decode_note_text
from .type_sniffer import Classification, classify

log = get_logger("interchange.converter")

TEXT_DECODERS: Dict[RecordKind, Callable[[str], Record]] = {
    RecordKind.METHOD: decode_method_text,
    RecordKind.BEAN: decode_bean_text,
    RecordKind.NOTE: decode_note_text,
}


def record_kind(record: Record) -> RecordKind:
    if isinstance(record, Method):
        return RecordKind.METHOD
    if isinstance(record, CoffeeBean):
        return RecordKind.BEAN
    if isinstance(record, BrewingNote):
        return RecordKind.NOTE
    raise TypeError(f"not a record: {type(record).__name__}")


def extract_record_from_text(text: str) -> Optional[Record]:
    """
    Single import entry point: pasted text in, record out.

    Returns None when the input cannot be understood (unrecognised, or the
    chosen decoder could not build a valid record). Never raises for bad input.
    """
    sniff = classify(text)

    try:
        if sniff.classification is Classification.JSON:
            record = decode_json_record(sniff.payload or {})
        elif sniff.kind is not None:
            record = TEXT_DECODERS[sniff.kind](sniff.cleaned)
        else:
            return None
    except InterchangeError as e:
        log.warning("import failed (%s, %s): %s", sniff.classification.value, e.kind, e.message)
        return None
    except ValidationError as e:
        log.warning("import failed (%s): %d invalid field(s) in %r",
                    sniff.classification.value, e.error_count(), preview(text))
        return None
    except (ValueError, OverflowError) as e:
        log.warning("import failed (%s): %s in %r",
                    sniff.classification.value, type(e).__name__, preview(text))
        return None

    log.info("imported %s via %s", record_kind(record).value, sniff.classification.value)
    return record
