# brewshare_backend/app/services/interchange/__init__.py
from __future__ import annotations

# Public surface of the share/import layer. Storage, UI and clipboard glue
# call in through these names only.

from .converter import extract_record_from_text, record_kind
from .errors import (
    DecodeResult,
    EmptyStagesError,
    InterchangeError,
    MalformedJsonError,
    MissingFieldError,
    UnrecognizedError,
)
from .json_codec import (
    generate_bean_template_json,
    generate_optimization_json,
    get_example_json,
    method_to_json,
    parse_method_from_json,
)
from .json_sanitizer import clean_json_for_optimization, clean_json_string
from .method_text import method_to_readable_text
from .bean_text import bean_to_readable_text
from .note_text import brewing_note_to_readable_text
from .type_sniffer import Classification, classify

__all__ = [
    # decode
    "extract_record_from_text",
    "parse_method_from_json",
    "classify",
    "Classification",
    "record_kind",
    # encode
    "method_to_readable_text",
    "bean_to_readable_text",
    "brewing_note_to_readable_text",
    "method_to_json",
    "generate_optimization_json",
    "get_example_json",
    "generate_bean_template_json",
    # sanitizing
    "clean_json_string",
    "clean_json_for_optimization",
    # errors
    "DecodeResult",
    "InterchangeError",
    "MissingFieldError",
    "EmptyStagesError",
    "MalformedJsonError",
    "UnrecognizedError",
]
