"""
Result Store Module
In-memory storage for tool results, network events and the tool catalogue
"""

import logging
import threading
from datetime import timedelta
from typing import Any, Dict, List, Optional

from .models import NetworkEvent, NetworkTool, Severity, ToolResult, ToolStatus, utcnow

logger = logging.getLogger(__name__)

DEFAULT_TOOLS = [
    {'name': 'Ping Tool', 'category': 'discovery',
     'description': 'Test network connectivity and latency', 'icon': 'satellite-dish'},
    {'name': 'Port Scanner', 'category': 'discovery',
     'description': 'Scan for open ports and services', 'icon': 'search'},
    {'name': 'DNS Lookup', 'category': 'dns',
     'description': 'Resolve domain names and IP addresses', 'icon': 'globe'},
    {'name': 'Whois Lookup', 'category': 'dns',
     'description': 'Domain registration information', 'icon': 'info-circle'},
    {'name': 'Speed Test', 'category': 'monitoring',
     'description': 'Measure internet speed and latency', 'icon': 'tachometer-alt'},
    {'name': 'Network Topology', 'category': 'monitoring',
     'description': 'Visualize network structure', 'icon': 'project-diagram'},
    {'name': 'SSL Analyzer', 'category': 'security',
     'description': 'Analyze SSL certificates', 'icon': 'lock'},
    {'name': 'Vulnerability Scanner', 'category': 'security',
     'description': 'Scan for security vulnerabilities', 'icon': 'shield-alt'},
    {'name': 'Subnet Calculator', 'category': 'tools',
     'description': 'Calculate network subnets', 'icon': 'calculator'},
    {'name': 'Bandwidth Monitor', 'category': 'monitoring',
     'description': 'Monitor real-time bandwidth usage', 'icon': 'chart-line'},
]

MOCK_EVENTS = [
    {'event_type': 'device_connected', 'severity': Severity.INFO,
     'message': 'Device connected: 192.168.1.104', 'source': 'network_monitor'},
    {'event_type': 'high_bandwidth', 'severity': Severity.WARNING,
     'message': 'High bandwidth usage detected on Server-01', 'source': 'bandwidth_monitor'},
    {'event_type': 'security_alert', 'severity': Severity.ERROR,
     'message': 'Suspicious activity detected from external IP', 'source': 'security_scanner'},
    {'event_type': 'backup_completed', 'severity': Severity.INFO,
     'message': 'Configuration backup completed successfully', 'source': 'backup_system'},
]

# Parameter keys that name the machine a tool was pointed at
TARGET_KEYS = ('host', 'domain', 'url', 'target', 'ipAddress')


def _newest_first(items: List[Any], limit: Optional[int] = None) -> List[Any]:
    # Reverse first so that insertion order breaks created_at ties
    ordered = sorted(reversed(items), key=lambda item: item.created_at, reverse=True)
    if limit:
        ordered = ordered[:limit]
    return ordered


def _apply_patch(record: Any, patch: Dict[str, Any], protected=('id', 'created_at')) -> None:
    for key, value in patch.items():
        if key in protected or not hasattr(record, key):
            continue
        setattr(record, key, value)


class MemoryStore:
    """
    Process-local store keyed by random identifiers

    Nothing survives a restart. A single lock guards all three maps since
    Flask serves requests from several threads.
    """

    def __init__(self, seed: bool = True):
        self.tools: Dict[str, NetworkTool] = {}
        self.results: Dict[str, ToolResult] = {}
        self.events: Dict[str, NetworkEvent] = {}
        self._lock = threading.Lock()

        if seed:
            self._seed_tools()
            self._seed_events()

    def _seed_tools(self):
        for tool in DEFAULT_TOOLS:
            self.create_tool(tool)

    def _seed_events(self):
        for event in MOCK_EVENTS:
            self.create_event(event)

    # =====================
    # Network Tools
    # =====================

    def list_tools(self) -> List[NetworkTool]:
        with self._lock:
            return list(self.tools.values())

    def get_tool(self, tool_id: str) -> Optional[NetworkTool]:
        with self._lock:
            return self.tools.get(tool_id)

    def create_tool(self, data: Dict[str, Any]) -> NetworkTool:
        tool = NetworkTool(**data)
        with self._lock:
            self.tools[tool.id] = tool
        return tool

    def update_tool(self, tool_id: str, patch: Dict[str, Any]) -> Optional[NetworkTool]:
        with self._lock:
            tool = self.tools.get(tool_id)
            if tool is None:
                return None
            _apply_patch(tool, patch)
            return tool

    # =====================
    # Tool Results
    # =====================

    def list_results(self, tool_name: Optional[str] = None,
                     limit: Optional[int] = None) -> List[ToolResult]:
        """
        List stored results, newest first

        Args:
            tool_name: Only return results produced by this tool
            limit: Maximum number of results to return
        """
        with self._lock:
            results = list(self.results.values())

        if tool_name:
            results = [r for r in results if r.tool_name == tool_name]

        return _newest_first(results, limit)

    def get_result(self, result_id: str) -> Optional[ToolResult]:
        with self._lock:
            return self.results.get(result_id)

    def create_result(self, tool_name: str, parameters: Optional[Dict[str, Any]] = None,
                      results: Any = None, status: ToolStatus = ToolStatus.COMPLETED,
                      execution_time: Optional[int] = None,
                      user_id: Optional[str] = None) -> ToolResult:
        result = ToolResult(
            tool_name=tool_name,
            parameters=parameters,
            results=results,
            status=status,
            execution_time=execution_time,
            user_id=user_id,
        )
        with self._lock:
            self.results[result.id] = result
        logger.debug(f"Stored {tool_name} result {result.id}")
        return result

    def delete_result(self, result_id: str) -> bool:
        with self._lock:
            return self.results.pop(result_id, None) is not None

    # =====================
    # Network Events
    # =====================

    def list_events(self, limit: Optional[int] = None) -> List[NetworkEvent]:
        with self._lock:
            events = list(self.events.values())
        return _newest_first(events, limit)

    def get_event(self, event_id: str) -> Optional[NetworkEvent]:
        with self._lock:
            return self.events.get(event_id)

    def create_event(self, data: Dict[str, Any]) -> NetworkEvent:
        event = NetworkEvent(**data)
        with self._lock:
            self.events[event.id] = event
        return event

    def update_event(self, event_id: str, patch: Dict[str, Any]) -> Optional[NetworkEvent]:
        with self._lock:
            event = self.events.get(event_id)
            if event is None:
                return None
            _apply_patch(event, patch)
            return event

    def delete_event(self, event_id: str) -> bool:
        with self._lock:
            return self.events.pop(event_id, None) is not None

    # =====================
    # Statistics
    # =====================

    def stats(self) -> Dict[str, int]:
        """Counts backing the dashboard summary"""
        with self._lock:
            results = list(self.results.values())
            events = list(self.events.values())

        targets = set()
        for result in results:
            params = result.parameters or {}
            for key in TARGET_KEYS:
                if params.get(key):
                    targets.add(str(params[key]).lower())
                    break

        since = utcnow() - timedelta(hours=24)
        return {
            'total_results': len(results),
            'results_last_24h': sum(1 for r in results if r.created_at >= since),
            'active_devices': len(targets),
            'open_alerts': sum(
                1 for e in events
                if not e.resolved and e.severity in (Severity.WARNING, Severity.ERROR)
            ),
        }
