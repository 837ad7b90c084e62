"""
Faults System (faults/)

Tests Fault, FaultDomain, Severity and the concrete domain faults.
"""

import httpx
import pytest

from activeresource.faults.core import Fault, FaultDomain, Severity
from activeresource.faults import (
    ConfigFault,
    ConfigInvalidFault,
    ConfigMissingFault,
    HttpFault,
    InvalidCallFault,
    InvalidConditionFault,
    IOFault,
    QueryFault,
    ResourceFault,
    ServerUnreachableFault,
    UnserializeFault,
)


# ============================================================================
# Severity
# ============================================================================

class TestSeverity:

    def test_values(self):
        assert Severity.INFO == "info"
        assert Severity.WARN == "warn"
        assert Severity.ERROR == "error"
        assert Severity.FATAL == "fatal"


# ============================================================================
# FaultDomain
# ============================================================================

class TestFaultDomain:

    def test_standard_domains(self):
        assert FaultDomain.CONFIG.name == "config"
        assert FaultDomain.IO.name == "io"
        assert FaultDomain.RESOURCE.name == "resource"
        assert FaultDomain.QUERY.name == "query"

    def test_custom_domain(self):
        custom = FaultDomain("billing", "Billing API errors")
        assert custom.name == "billing"
        assert custom.description == "Billing API errors"

    def test_domain_equality(self):
        assert FaultDomain("test") == FaultDomain("test")
        assert FaultDomain("test") != FaultDomain("other")
        assert FaultDomain.IO == "io"

    def test_domain_hashable(self):
        d = FaultDomain("test", "")
        assert d in {d}


# ============================================================================
# Fault
# ============================================================================

class TestFault:

    def test_basic_fault(self):
        f = Fault(
            code="RESOURCE_GONE",
            message="Resource removed",
            domain=FaultDomain.RESOURCE,
        )
        assert f.code == "RESOURCE_GONE"
        assert f.message == "Resource removed"
        assert f.domain == FaultDomain.RESOURCE
        assert f.severity == Severity.ERROR
        assert f.retryable is False
        assert f.public is False

    def test_fault_str(self):
        f = Fault(code="ERR", message="Something wrong", domain=FaultDomain.QUERY)
        assert str(f) == "[ERR] Something wrong"

    def test_fault_raise(self):
        with pytest.raises(Fault) as exc_info:
            raise Fault(code="BANG", message="kaboom", domain=FaultDomain.IO)
        assert exc_info.value.code == "BANG"
        assert exc_info.value.retryable is True

    def test_custom_domain_defaults(self):
        f = Fault(code="X", message="m", domain=FaultDomain("billing"))
        assert f.severity == Severity.ERROR
        assert f.retryable is False

    def test_fault_subclass(self):
        class GoneFault(Fault):
            code = "GONE"
            message = "Resource gone"
            domain = FaultDomain.RESOURCE

        f = GoneFault()
        assert f.code == "GONE"
        assert f.domain == FaultDomain.RESOURCE

    def test_fault_missing_required_raises(self):
        with pytest.raises(TypeError):
            Fault(code="X")

    def test_to_dict(self):
        f = Fault(code="ERR", message="msg", domain=FaultDomain.IO, metadata={"k": 1})
        assert f.to_dict() == {
            "code": "ERR",
            "message": "msg",
            "domain": "io",
            "severity": "error",
            "retryable": True,
            "public": False,
            "metadata": {"k": 1},
        }

    def test_empty_message_allowed(self):
        f = HttpFault(500, "")
        assert str(f) == "[HTTP_ERROR] HTTP 500: "

    def test_metadata_is_copied(self):
        meta = {"k": 1}
        f = Fault(code="ERR", message="msg", domain=FaultDomain.IO, metadata=meta)
        f.metadata["k"] = 2
        assert meta == {"k": 1}

    def test_repr(self):
        f = InvalidCallFault("one", "bad")
        assert repr(f) == "InvalidCallFault(code='INVALID_CALL', domain=query)"


# ============================================================================
# Domain faults
# ============================================================================

class TestDomainFaults:

    def test_config_missing(self):
        f = ConfigMissingFault("User.Meta.api_url")
        assert isinstance(f, ConfigFault)
        assert f.code == "CONFIG_MISSING"
        assert f.severity == Severity.FATAL
        assert f.metadata["key"] == "User.Meta.api_url"

    def test_config_invalid(self):
        f = ConfigInvalidFault("timeout", "must be positive")
        assert f.code == "CONFIG_INVALID"
        assert "must be positive" in f.message

    def test_server_unreachable(self):
        cause = httpx.ConnectError("Connection refused")
        f = ServerUnreachableFault("https://api.test/v1/", cause)

        assert isinstance(f, IOFault)
        assert f.status_code == 500
        assert f.cause is cause
        assert f.base_url == "https://api.test/v1/"
        assert f.message == "ConnectError: url=https://api.test/v1/ Connection refused"
        assert f.metadata["cause"] == "ConnectError"

    def test_http_fault(self):
        f = HttpFault(404, "User not found")
        assert isinstance(f, ResourceFault)
        assert f.status_code == 404
        assert f.public is True
        assert str(f) == "[HTTP_ERROR] HTTP 404: User not found"

    def test_unserialize_fault(self):
        f = UnserializeFault("application/json", "Expecting value")
        assert f.code == "UNSERIALIZE_FAILED"
        assert f.severity == Severity.WARN
        assert f.metadata["data_type"] == "application/json"

    def test_invalid_call(self):
        f = InvalidCallFault("one", 'can not be called with "where" clause')
        assert isinstance(f, QueryFault)
        assert f.message == 'one() can not be called with "where" clause'
        assert f.retryable is False

    def test_invalid_condition(self):
        f = InvalidConditionFault("ids", [1, 2])
        assert f.code == "INVALID_CONDITION"
        assert f.metadata == {"field": "ids", "type": "list"}


# ============================================================================
# Domain Defaults
# ============================================================================

class TestDomainDefaults:

    @pytest.mark.parametrize("domain,severity,retryable", [
        (FaultDomain.CONFIG, Severity.FATAL, False),
        (FaultDomain.IO, Severity.ERROR, True),
        (FaultDomain.RESOURCE, Severity.ERROR, False),
        (FaultDomain.QUERY, Severity.ERROR, False),
    ])
    def test_defaults_per_domain(self, domain, severity, retryable):
        f = Fault(code="X", message="m", domain=domain)
        assert f.severity == severity
        assert f.retryable is retryable

    def test_explicit_values_win(self):
        f = Fault(code="X", message="m", domain=FaultDomain.IO, severity=Severity.WARN, retryable=False)
        assert f.severity == Severity.WARN
        assert f.retryable is False
