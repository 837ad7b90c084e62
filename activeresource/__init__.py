"""
ActiveResource - REST resources behind a query builder.

Maps model classes onto a REST-style HTTP API:
- Query builder: select, where, limit, offset
- CRUD: all, one, create, update, delete
- Pagination and count discovery (headers, HEAD, envelopes)
- Pluggable response unserializers
- Structured faults for transport, HTTP and usage errors
"""

__version__ = "0.1.0"

from .config import QueryConfig, ConfigLoader, ConfigError
from .http import HttpClient, Response
from .unserializers import (
    Unserializer,
    JsonUnserializer,
    YamlUnserializer,
    UnserializerRegistry,
)
from .models import (
    Model,
    Manager,
    Query,
    Ok,
    ValidationFailed,
    HttpFailure,
    TransportFailure,
    Outcome,
)
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    HttpFault,
    ServerUnreachableFault,
    InvalidCallFault,
    InvalidConditionFault,
    UnserializeFault,
    ConfigMissingFault,
    ConfigInvalidFault,
)

__all__ = [
    "__version__",
    # Config
    "QueryConfig",
    "ConfigLoader",
    "ConfigError",
    # Transport
    "HttpClient",
    "Response",
    # Unserializers
    "Unserializer",
    "JsonUnserializer",
    "YamlUnserializer",
    "UnserializerRegistry",
    # Models
    "Model",
    "Manager",
    "Query",
    "Ok",
    "ValidationFailed",
    "HttpFailure",
    "TransportFailure",
    "Outcome",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "HttpFault",
    "ServerUnreachableFault",
    "InvalidCallFault",
    "InvalidConditionFault",
    "UnserializeFault",
    "ConfigMissingFault",
    "ConfigInvalidFault",
]
