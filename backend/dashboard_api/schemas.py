"""
Request Schemas
Pydantic models validating every request body before a tool runs
"""

import ipaddress
import re
from typing import Annotated, Any, Dict, Optional, Union

from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from nettools.dns_lookup import RECORD_TYPES
from nettools.models import Severity, ToolStatus
from nettools.port_scanner import MAX_PORT_SPAN
from nettools.ssl_analyzer import hostname_from_url
from nettools.subnet_calculator import mask_to_prefix

HOSTNAME_RE = re.compile(
    r'^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?'
    r'(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$'
)


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def check_host(value: str) -> str:
    """IP literal or RFC 1123 hostname"""
    value = value.strip()
    if _is_ip(value):
        return value
    if not value or len(value) > 253 or not HOSTNAME_RE.match(value):
        raise ValueError(f"invalid host or IP address: {value!r}")
    return value


def check_domain(value: str) -> str:
    value = value.strip().rstrip('.')
    if _is_ip(value) or '.' not in value or len(value) > 253 or not HOSTNAME_RE.match(value):
        raise ValueError(f"invalid domain name: {value!r}")
    return value.lower()


def check_ipv4(value: str) -> str:
    value = value.strip()
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        raise ValueError(f"invalid IPv4 address: {value!r}")
    return value


Host = Annotated[str, AfterValidator(check_host)]
Domain = Annotated[str, AfterValidator(check_domain)]
IPv4Address = Annotated[str, AfterValidator(check_ipv4)]


# =====================
# Tool requests
# =====================

class PingRequest(BaseModel):
    host: Host
    count: int = Field(4, ge=1, le=20)
    timeout: int = Field(5000, ge=100, le=30000, description="Milliseconds")


class PortScanRequest(BaseModel):
    host: Host
    startPort: int = Field(1, ge=1, le=65535)
    endPort: int = Field(1000, ge=1, le=65535)

    @model_validator(mode='after')
    def check_range(self):
        if self.startPort > self.endPort:
            raise ValueError("startPort must not exceed endPort")
        if self.endPort - self.startPort + 1 > MAX_PORT_SPAN:
            raise ValueError(f"port range too large (max {MAX_PORT_SPAN})")
        return self


class DnsLookupRequest(BaseModel):
    domain: Domain
    recordType: str = 'A'
    dnsServer: Optional[str] = None

    @field_validator('recordType')
    @classmethod
    def check_record_type(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in RECORD_TYPES:
            raise ValueError(f"unsupported recordType {value}")
        return value

    @field_validator('dnsServer')
    @classmethod
    def check_dns_server(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not _is_ip(value):
            raise ValueError(f"dnsServer must be an IP address: {value!r}")
        return value


class WhoisRequest(BaseModel):
    domain: Domain


class SslAnalyzeRequest(BaseModel):
    url: str
    port: int = Field(443, ge=1, le=65535)

    @field_validator('url')
    @classmethod
    def check_url(cls, value: str) -> str:
        value = value.strip()
        check_host(hostname_from_url(value))
        return value


class SubnetCalculateRequest(BaseModel):
    ipAddress: IPv4Address
    subnetMask: Union[int, str]
    subnetCount: int = Field(4, ge=1, le=256)

    @field_validator('subnetMask')
    @classmethod
    def check_mask(cls, value: Union[int, str]) -> int:
        return mask_to_prefix(value)


class SpeedTestRequest(BaseModel):
    server: Optional[str] = None


class VulnerabilityScanRequest(BaseModel):
    target: str
    scanPorts: bool = False
    scanSSL: bool = False
    scanHeaders: bool = False
    scanWebApps: bool = False
    aggressive: bool = False

    @field_validator('target')
    @classmethod
    def check_target(cls, value: str) -> str:
        value = value.strip()
        check_host(hostname_from_url(value) if '://' in value else value)
        return value


# =====================
# Store requests
# =====================

class ResultCreate(BaseModel):
    toolName: str = Field(..., min_length=1)
    parameters: Optional[Dict[str, Any]] = None
    results: Optional[Any] = None
    status: ToolStatus = ToolStatus.COMPLETED
    executionTime: Optional[int] = Field(None, ge=0)
    userId: Optional[str] = None

    def to_fields(self) -> Dict[str, Any]:
        return {
            'tool_name': self.toolName,
            'parameters': self.parameters,
            'results': self.results,
            'status': self.status,
            'execution_time': self.executionTime,
            'user_id': self.userId,
        }


class EventCreate(BaseModel):
    eventType: str = Field(..., min_length=1)
    severity: Severity
    message: str = Field(..., min_length=1)
    source: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    resolved: bool = False

    def to_fields(self) -> Dict[str, Any]:
        return {
            'event_type': self.eventType,
            'severity': self.severity,
            'message': self.message,
            'source': self.source,
            'metadata': self.metadata,
            'resolved': self.resolved,
        }


EVENT_FIELDS = {
    'eventType': 'event_type',
    'severity': 'severity',
    'message': 'message',
    'source': 'source',
    'metadata': 'metadata',
    'resolved': 'resolved',
}


def _not_null(value):
    if value is None:
        raise ValueError("field may not be null")
    return value


class EventPatch(BaseModel):
    """Partial event update; only the keys present in the body change"""
    eventType: Optional[str] = Field(None, min_length=1)
    severity: Optional[Severity] = None
    message: Optional[str] = Field(None, min_length=1)
    source: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    resolved: Optional[bool] = None

    # Nullable fields may be cleared with an explicit null, these may not
    @field_validator('eventType', 'severity', 'message', 'resolved')
    @classmethod
    def check_not_null(cls, value):
        return _not_null(value)

    def to_fields(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        return {EVENT_FIELDS[key]: value for key, value in data.items()}


class ToolPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    icon: Optional[str] = None
    enabled: Optional[bool] = None

    @field_validator('name', 'category', 'enabled')
    @classmethod
    def check_not_null(cls, value):
        return _not_null(value)

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
