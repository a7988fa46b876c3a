# brewshare_backend/app/services/interchange/errors.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from brewshare_backend.app.schemas import Record


class InterchangeError(ValueError):
    """Base class for record-defining decode failures."""
    kind = "InterchangeError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# A record-defining field is absent after all fallbacks (no name, no equipment).
class MissingFieldError(InterchangeError):
    kind = "MissingField"

# A method decoded to zero usable stages.
class EmptyStagesError(InterchangeError):
    kind = "EmptyStages"

# Sanitizing could not produce parseable JSON.
class MalformedJsonError(InterchangeError):
    kind = "MalformedJson"

# Classification produced no candidate kind.
class UnrecognizedError(InterchangeError):
    kind = "Unrecognized"


@dataclass
class DecodeResult:
    """
    Outcome of a decode that must not raise: either a record, or the
    error kind plus a human-readable diagnostic.
    """
    record: Optional[Record] = None
    error_kind: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, record: Record) -> "DecodeResult":
        return cls(record=record)

    @classmethod
    def failure(cls, err: InterchangeError) -> "DecodeResult":
        return cls(error_kind=err.kind, message=err.message)
