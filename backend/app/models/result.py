"""Explicit success/failure variants returned by orchestration stages."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FailureReason(str, Enum):
    """Why a stage did not produce a value."""

    UNCONFIGURED = "unconfigured"
    TIMEOUT = "timeout"
    UPSTREAM_ERROR = "upstream_error"
    BREAKER_OPEN = "breaker_open"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_STRUCTURE = "invalid_structure"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: FailureReason
    detail: str = ""
    error: Exception | None = None


StageResult = Union[Ok[T], Err]
