"""
ActiveResource Faults - Core types.

Defines:
- Fault base class (code, message, domain, severity, metadata)
- FaultDomain (the area of the library a fault comes from)
- Severity levels
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """How serious a fault is for the caller."""
    INFO = "info"
    WARN = "warn"       # Recovered internally (e.g. decode fallback)
    ERROR = "error"     # The call failed
    FATAL = "fatal"     # Nothing will work until config or network changes


class FaultDomain:
    """
    Named fault domain.

    The four standard domains are attached as class attributes; callers
    may create their own (``FaultDomain("billing")``).
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    @property
    def value(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain({self.name!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return self.name == other

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Model metadata and QueryConfig")
FaultDomain.IO = FaultDomain("io", "Reaching the remote API")
FaultDomain.RESOURCE = FaultDomain("resource", "Responses of the remote API")
FaultDomain.QUERY = FaultDomain("query", "Misuse of the query builder")


# (severity, retryable) per standard domain; custom domains use ERROR / False
DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: (Severity.FATAL, False),
    FaultDomain.IO: (Severity.ERROR, True),
    FaultDomain.RESOURCE: (Severity.ERROR, False),
    FaultDomain.QUERY: (Severity.ERROR, False),
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base class of every error raised by ActiveResource.

    Attributes:
        code: Stable machine-readable identifier (e.g. "HTTP_ERROR")
        message: Human-readable summary
        domain: FaultDomain the fault belongs to
        severity: Severity, defaulted from the domain
        retryable: Whether repeating the call may succeed
        public: Whether the message is safe to show an end user
        metadata: Structured context (status codes, keys, URLs)

    Subclasses may set ``code``, ``message`` and ``domain`` as class
    attributes instead of passing them:

        class GoneFault(Fault):
            code = "GONE"
            message = "Resource was removed"
            domain = FaultDomain.RESOURCE
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code or getattr(type(self), "code", None)
        self.message = message if message is not None else getattr(type(self), "message", None)
        self.domain = domain or getattr(type(self), "domain", None)
        if not (self.code and self.message is not None and self.domain):
            raise TypeError(f"{type(self).__name__} needs a code, a message and a domain")

        super().__init__(self.message)

        default_severity, default_retryable = DOMAIN_DEFAULTS.get(
            self.domain, (Severity.ERROR, False)
        )
        self.severity = severity or default_severity
        self.retryable = default_retryable if retryable is None else retryable
        self.public = public
        self.metadata = dict(metadata or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain.name})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view, used by ``ar --json-errors``."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.name,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "public": self.public,
            "metadata": self.metadata,
        }
