"""Stage results and terminal outcomes for a lookup pipeline run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class PipelineState(str, Enum):
    """States a single lookup run moves through."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    EXTRACTION_FAILED = "extraction_failed"
    SEARCHING = "searching"
    LOOKUP_FAILED = "lookup_failed"
    FOUND = "found"
    NOT_FOUND = "not_found"
    DELIVERED = "delivered"


class FailureKind(str, Enum):
    """Why a run did not deliver a report."""

    SOURCE_MESSAGE_MISSING = "source_message_missing"
    EXTRACTION_EMPTY = "extraction_empty"
    EXTRACTION_FAILURE = "extraction_failure"
    LOOKUP_EMPTY = "lookup_empty"
    LOOKUP_FAILURE = "lookup_failure"
    DELIVERY_FAILURE = "delivery_failure"


# ---------------------------------------------------------------------------
# Collaborator call results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Value(Generic[T]):
    """The collaborator returned a usable value."""

    value: T


@dataclass(frozen=True)
class Empty:
    """The collaborator ran successfully but found nothing."""


@dataclass(frozen=True)
class Failure:
    """The collaborator call raised."""

    error: Exception


StageResult = Union[Value[T], Empty, Failure]


def attempt(fn: Callable[..., T | None], *args: object) -> StageResult[T]:
    """Call ``fn`` once, classifying its result as Value, Empty or Failure."""
    try:
        result = fn(*args)
    except Exception as exc:  # noqa: BLE001
        return Failure(exc)
    if result is None:
        return Empty()
    return Value(result)


# ---------------------------------------------------------------------------
# Terminal outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Delivered:
    """The rendered report reached the conversation."""

    report: str
    state: PipelineState = PipelineState.DELIVERED


@dataclass(frozen=True)
class DeliveredError:
    """A definitive error message reached the conversation."""

    kind: FailureKind
    state: PipelineState = PipelineState.DELIVERED


@dataclass(frozen=True)
class Unrecoverable:
    """The run stopped without delivering its final message."""

    kind: FailureKind
    state: PipelineState


DeliveryOutcome = Union[Delivered, DeliveredError, Unrecoverable]
