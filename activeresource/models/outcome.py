"""
Query outcomes — tagged results of a terminal query call.

``Query.try_*`` methods return one of these instead of raising, so callers
can branch on the outcome type:

    outcome = User.objects.try_create(user)
    match outcome:
        case Ok(value=created):
            ...
        case ValidationFailed(field=field, message=message):
            ...
        case HttpFailure(status_code=status):
            ...
        case TransportFailure():
            ...

``unwrap()`` converts any outcome back to the raising form used by the
plain terminal methods.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from ..faults import HttpFault, ServerUnreachableFault

if TYPE_CHECKING:
    from .base import Model

__all__ = ["Ok", "ValidationFailed", "HttpFailure", "TransportFailure", "Outcome"]


@dataclass(frozen=True)
class Ok:
    """The request succeeded; ``value`` is a model, a list of models or ``None``."""
    value: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ValidationFailed:
    """
    The API rejected one field (422). The error is already attached to ``model``.
    """
    model: Model
    field: str
    message: str

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Model:
        return self.model


@dataclass(frozen=True)
class HttpFailure:
    """The API answered with an error status."""
    status_code: int
    message: str

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise HttpFault(self.status_code, self.message)


@dataclass(frozen=True)
class TransportFailure:
    """The API could not be reached."""
    fault: ServerUnreachableFault

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.fault


# Union type for query outcomes
Outcome = Ok | ValidationFailed | HttpFailure | TransportFailure
