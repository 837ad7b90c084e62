"""
ActiveResource Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- IO faults (transport)
- RESOURCE faults (HTTP responses, decoding)
- QUERY faults (invalid usage)
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ConfigMissingFault(ConfigFault):
    """Required configuration is missing."""

    def __init__(self, key: str, **kwargs):
        super().__init__(
            code="CONFIG_MISSING",
            message=f"Required configuration key '{key}' is missing",
            metadata={"key": key, **kwargs.get("metadata", {})},
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# IO Faults
# ============================================================================

class IOFault(Fault):
    """Base class for transport faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        retryable: bool = True,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.IO,
            severity=severity,
            retryable=retryable,
            public=False,
            metadata=metadata,
        )


class ServerUnreachableFault(IOFault):
    """
    The remote API could not be reached (connect, timeout, DNS, protocol).

    Reported as a 500-class server error. The request is not retried.
    """

    status_code = 500

    def __init__(self, base_url: str, cause: BaseException, **kwargs):
        self.base_url = base_url
        self.cause = cause
        super().__init__(
            code="SERVER_UNREACHABLE",
            message=f"{type(cause).__name__}: url={base_url} {cause}",
            severity=Severity.FATAL,
            metadata={
                "base_url": base_url,
                "cause": type(cause).__name__,
                "status_code": self.status_code,
                **kwargs.get("metadata", {}),
            },
        )


# ============================================================================
# RESOURCE Faults
# ============================================================================

class ResourceFault(Fault):
    """Base class for faults reported by, or about, the remote resource."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        public: bool = True,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.RESOURCE,
            severity=severity,
            retryable=False,
            public=public,
            metadata=metadata,
        )


class HttpFault(ResourceFault):
    """The API answered with an error status (>= 400)."""

    def __init__(self, status_code: int, message: str, **kwargs):
        self.status_code = status_code
        super().__init__(
            code="HTTP_ERROR",
            message=message,
            metadata={"status_code": status_code, **kwargs.get("metadata", {})},
        )

    def __str__(self) -> str:
        return f"[{self.code}] HTTP {self.status_code}: {self.message}"


class UnserializeFault(ResourceFault):
    """A response body could not be decoded."""

    def __init__(self, data_type: str, reason: str, **kwargs):
        super().__init__(
            code="UNSERIALIZE_FAILED",
            message=f"Cannot unserialize '{data_type}' body: {reason}",
            severity=Severity.WARN,
            public=False,
            metadata={"data_type": data_type, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# QUERY Faults
# ============================================================================

class QueryFault(Fault):
    """Base class for invalid query usage."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.QUERY,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class InvalidCallFault(QueryFault):
    """A query method was called in a state that does not allow it."""

    def __init__(self, method: str, reason: str, **kwargs):
        super().__init__(
            code="INVALID_CALL",
            message=f"{method}() {reason}",
            metadata={"method": method, "reason": reason, **kwargs.get("metadata", {})},
        )


class InvalidConditionFault(QueryFault):
    """A where() condition value cannot be sent as a query parameter."""

    def __init__(self, field: str, value: Any, **kwargs):
        super().__init__(
            code="INVALID_CONDITION",
            message=(
                f"Condition '{field}' has unsupported value of type "
                f"{type(value).__name__}; pass a scalar or a pre-serialized string"
            ),
            metadata={"field": field, "type": type(value).__name__, **kwargs.get("metadata", {})},
        )
