#!/usr/bin/env python3
"""
Tools API Handler
Runs the dashboard's network tools and records every invocation as a result
"""

import logging
import random
import time
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from dashboard_api.schemas import (
    DnsLookupRequest, PingRequest, PortScanRequest, SpeedTestRequest,
    SslAnalyzeRequest, SubnetCalculateRequest, VulnerabilityScanRequest,
    WhoisRequest,
)
from nettools import (
    dns_lookup, ping, port_scanner, ssl_analyzer, speed_test,
    subnet_calculator, vulnerability_scanner, whois_lookup,
)
from nettools.models import ToolResult
from nettools.storage import MemoryStore

logger = logging.getLogger(__name__)

# tool name -> label used in error messages
TOOL_LABELS = {
    'ping': 'Ping',
    'port-scan': 'Port scan',
    'dns-lookup': 'DNS lookup',
    'whois-lookup': 'Whois lookup',
    'ssl-analyze': 'SSL analysis',
    'subnet-calculate': 'Subnet calculation',
    'speed-test': 'Speed test',
    'vulnerability-scan': 'Vulnerability scan',
}


class UnknownTool(KeyError):
    pass


class ToolsAPI:
    """Execution service shared by the HTTP routes and the socket handler"""

    def __init__(self, store: MemoryStore, simulated: bool = False, websocket=None,
                 rng: Optional[random.Random] = None,
                 scanner: Optional[port_scanner.PortScanner] = None):
        self.store = store
        self.simulated = simulated
        self.websocket = websocket
        self.rng = rng or random.Random()
        self.scanner = scanner or port_scanner.PortScanner()

        # handler returns (results, simulated duration in ms or None)
        self._tools: Dict[str, Tuple[type, Callable[[Any], Tuple[Dict, Optional[int]]]]] = {
            'ping': (PingRequest, self._ping),
            'port-scan': (PortScanRequest, self._port_scan),
            'dns-lookup': (DnsLookupRequest, self._dns_lookup),
            'whois-lookup': (WhoisRequest, self._whois_lookup),
            'ssl-analyze': (SslAnalyzeRequest, self._ssl_analyze),
            'subnet-calculate': (SubnetCalculateRequest, self._subnet_calculate),
            'speed-test': (SpeedTestRequest, self._speed_test),
            'vulnerability-scan': (VulnerabilityScanRequest, self._vulnerability_scan),
        }

    @property
    def tool_names(self):
        return list(self._tools)

    def validate(self, tool_name: str, payload: Optional[Dict]) -> BaseModel:
        """
        Parse a request body for one tool

        Raises:
            UnknownTool: no tool with that name
            pydantic.ValidationError: payload does not match the tool's schema
        """
        if tool_name not in self._tools:
            raise UnknownTool(tool_name)
        model, _ = self._tools[tool_name]
        return model.model_validate(payload if payload is not None else {})

    def run(self, tool_name: str, payload: Optional[Dict]) -> ToolResult:
        """
        Validate, execute and store one tool invocation

        Nothing is stored when validation or the handler raises.
        """
        params = self.validate(tool_name, payload)
        _, handler = self._tools[tool_name]

        started = time.perf_counter()
        results, simulated_ms = handler(params)
        elapsed_ms = round((time.perf_counter() - started) * 1000)

        result = self.store.create_result(
            tool_name,
            parameters=params.model_dump(mode='json'),
            results=results,
            execution_time=simulated_ms if simulated_ms is not None else elapsed_ms,
        )
        logger.info(f"{tool_name} completed in {result.execution_time}ms (result {result.id})")

        if self.websocket:
            try:
                self.websocket.broadcast_tool_result(result.to_dict())
            except Exception as e:
                logger.warning(f"Could not broadcast result {result.id}: {e}")

        return result

    # =====================
    # Handlers
    # =====================

    def _ping(self, params: PingRequest):
        if self.simulated:
            return ping.simulate_ping(params.host, params.count, params.timeout, rng=self.rng), None
        return ping.ping_host(params.host, params.count, params.timeout), None

    def _port_scan(self, params: PortScanRequest):
        if self.simulated:
            results = port_scanner.simulate_port_scan(
                params.host, params.startPort, params.endPort, rng=self.rng
            )
        else:
            results = port_scanner.scan_ports(
                params.host, params.startPort, params.endPort, scanner=self.scanner
            )
        return results, None

    def _dns_lookup(self, params: DnsLookupRequest):
        if self.simulated:
            results = dns_lookup.simulate_lookup(
                params.domain, params.recordType, params.dnsServer, rng=self.rng
            )
        else:
            results = dns_lookup.lookup(params.domain, params.recordType, params.dnsServer)
        return results, None

    def _whois_lookup(self, params: WhoisRequest):
        if self.simulated:
            return whois_lookup.simulate_lookup(params.domain, rng=self.rng), None
        return whois_lookup.lookup(params.domain), None

    def _ssl_analyze(self, params: SslAnalyzeRequest):
        if self.simulated:
            return ssl_analyzer.simulate_analyze(params.url, params.port, rng=self.rng), None
        return ssl_analyzer.analyze(params.url, params.port), None

    def _subnet_calculate(self, params: SubnetCalculateRequest):
        return subnet_calculator.calculate(params.ipAddress, params.subnetMask, params.subnetCount), None

    def _speed_test(self, params: SpeedTestRequest):
        results = speed_test.run_speed_test(params.server, rng=self.rng)
        return results, speed_test.SIMULATED_DURATION_MS

    def _vulnerability_scan(self, params: VulnerabilityScanRequest):
        results = vulnerability_scanner.scan(
            params.target,
            scan_ports=params.scanPorts,
            scan_ssl=params.scanSSL,
            scan_headers=params.scanHeaders,
            scan_web_apps=params.scanWebApps,
            aggressive=params.aggressive,
            rng=self.rng,
        )
        return results, results['scanTime'] * 1000
