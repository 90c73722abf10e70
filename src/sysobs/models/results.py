"""Tagged success/failure results for expected, recoverable conditions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    MISSING_VERSION = "missing_version"
    MISSING_ENVELOPE_ID = "missing_envelope_id"
    INSUFFICIENT_DATA = "insufficient_data"
    NOT_TRENDING = "not_trending"
    ALREADY_BREACHED = "already_breached"
    UNREADABLE_INPUT = "unreadable_input"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    error: ErrorKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
