"""
ActiveResource Faults - typed fault signals.

Every error raised by the package is a ``Fault``: a structured value with a
stable code, a domain, a severity and metadata.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- Concrete faults for config, transport, resource and query errors
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ConfigFault,
    ConfigMissingFault,
    ConfigInvalidFault,
    IOFault,
    ServerUnreachableFault,
    ResourceFault,
    HttpFault,
    UnserializeFault,
    QueryFault,
    InvalidCallFault,
    InvalidConditionFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Domain faults
    "ConfigFault",
    "ConfigMissingFault",
    "ConfigInvalidFault",
    "IOFault",
    "ServerUnreachableFault",
    "ResourceFault",
    "HttpFault",
    "UnserializeFault",
    "QueryFault",
    "InvalidCallFault",
    "InvalidConditionFault",
]
