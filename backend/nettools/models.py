"""
Dashboard Data Model
Tool results, network events and the tool catalogue
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ToolStatus(Enum):
    """Tool invocation states"""
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class Severity(Enum):
    """Network event severity levels"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class InvalidToolInput(ValueError):
    """Input passed schema validation but the tool cannot work with it"""


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class NetworkTool:
    """Catalogue entry shown on the dashboard"""
    name: str
    category: str
    description: Optional[str] = None
    icon: Optional[str] = None
    enabled: bool = True
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'description': self.description,
            'icon': self.icon,
            'enabled': self.enabled,
            'createdAt': _iso(self.created_at),
        }


@dataclass
class ToolResult:
    """
    Result envelope persisted for every tool invocation

    ``parameters`` and ``results`` are arbitrary JSON. ``execution_time`` is
    in milliseconds.
    """
    tool_name: str
    parameters: Optional[Dict[str, Any]] = None
    results: Any = None
    status: ToolStatus = ToolStatus.COMPLETED
    execution_time: Optional[int] = None
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'toolName': self.tool_name,
            'userId': self.user_id,
            'parameters': self.parameters,
            'results': self.results,
            'status': self.status.value,
            'executionTime': self.execution_time,
            'createdAt': _iso(self.created_at),
        }


@dataclass
class NetworkEvent:
    """Something noteworthy that happened on the monitored network"""
    event_type: str
    severity: Severity
    message: str
    source: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    resolved: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'eventType': self.event_type,
            'severity': self.severity.value,
            'message': self.message,
            'source': self.source,
            'metadata': self.metadata,
            'resolved': self.resolved,
            'createdAt': _iso(self.created_at),
        }
