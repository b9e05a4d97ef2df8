#!/usr/bin/env python3
"""
Port Scanner Module
TCP connect scan over a bounded port range
"""

import random
import socket
import logging
from typing import Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)

MAX_PORT_SPAN = 2000


class PortScanner:
    """Batched TCP connect scanner"""

    # Well-known port to service mapping
    PORT_SERVICES = {
        21: 'FTP',
        22: 'SSH',
        23: 'Telnet',
        25: 'SMTP',
        53: 'DNS',
        80: 'HTTP',
        110: 'POP3',
        135: 'RPC',
        139: 'SMB',
        143: 'IMAP',
        161: 'SNMP',
        389: 'LDAP',
        443: 'HTTPS',
        445: 'SMB',
        465: 'SMTPS',
        587: 'SMTP',
        636: 'LDAPS',
        993: 'IMAPS',
        995: 'POP3S',
        1433: 'MSSQL',
        1521: 'Oracle',
        3306: 'MySQL',
        3389: 'RDP',
        5432: 'PostgreSQL',
        5900: 'VNC',
        6379: 'Redis',
        8080: 'HTTP-Alt',
        8443: 'HTTPS-Alt',
        9200: 'Elasticsearch',
        27017: 'MongoDB'
    }

    # Ports the simulated scanner may report
    SIMULATED_PORTS = [22, 23, 53, 80, 110, 143, 443, 993, 995, 3389, 8080, 8443]

    def __init__(self, timeout: float = 0.75, batch_size: int = 100):
        self.timeout = timeout  # Socket timeout in seconds
        self.batch_size = batch_size  # Sockets open at once

    def resolve(self, host: str):
        """Resolve host once so every connect attempt reuses the same address"""
        family, _, _, _, sockaddr = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)[0]
        return family, sockaddr[0]

    def scan_port(self, host: str, port: int, family: int = socket.AF_INET) -> bool:
        """Return True when a TCP connection to host:port succeeds"""
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)

        try:
            return sock.connect_ex((host, port)) == 0
        except (socket.timeout, OSError) as e:
            logger.debug(f"Error scanning {host}:{port} - {e}")
            return False
        finally:
            sock.close()

    def scan_range(self, host: str, start_port: int, end_port: int) -> List[int]:
        """
        Scan every port in [start_port, end_port]

        Ports are handled in fixed-size batches: the sockets of one batch
        run concurrently, batches run one after another.

        Returns:
            Sorted list of open port numbers
        """
        family, address = self.resolve(host)
        ports = list(range(start_port, end_port + 1))
        open_ports = []

        def try_port(port):
            return self.scan_port(address, port, family)

        with ThreadPoolExecutor(max_workers=min(self.batch_size, len(ports))) as executor:
            for i in range(0, len(ports), self.batch_size):
                batch = ports[i:i + self.batch_size]
                for port, is_open in zip(batch, executor.map(try_port, batch)):
                    if is_open:
                        open_ports.append(port)

        return sorted(open_ports)

    def service_name(self, port: int) -> Optional[str]:
        return self.PORT_SERVICES.get(port)

    def format_results(self, host: str, open_ports: List[int], start_port: int,
                       end_port: int, unknown_service: Optional[str] = None) -> Dict:
        entries = [
            {
                'port': port,
                'protocol': 'TCP',
                'state': 'open',
                'service': self.PORT_SERVICES.get(port, unknown_service)
            }
            for port in open_ports
        ]
        return {
            'host': host,
            'openPorts': entries,
            'totalScanned': end_port - start_port + 1,
            'openCount': len(entries),
        }


def scan_ports(host: str, start_port: int = 1, end_port: int = 1000,
               scanner: Optional[PortScanner] = None) -> Dict:
    """Scan a port range on a host and shape the output for the dashboard"""
    scanner = scanner or PortScanner()

    logger.info(f"Scanning ports {start_port}-{end_port} on {host}")
    open_ports = scanner.scan_range(host, start_port, end_port)
    logger.info(f"Port scan of {host} found {len(open_ports)} open ports")

    results = scanner.format_results(host, open_ports, start_port, end_port)
    results['simulated'] = False
    return results


def simulate_port_scan(host: str, start_port: int = 1, end_port: int = 1000,
                       rng: Optional[random.Random] = None) -> Dict:
    """Pretend to scan: each well-known port in range is open 30% of the time"""
    rng = rng or random.Random()
    open_ports = [
        port for port in PortScanner.SIMULATED_PORTS
        if start_port <= port <= end_port and rng.random() > 0.7
    ]
    results = PortScanner().format_results(host, open_ports, start_port, end_port,
                                           unknown_service='Unknown')
    results['simulated'] = True
    return results


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    print("Testing port scan on localhost...")
    result = scan_ports("127.0.0.1", 1, 1024)
    print(f"Open ports: {result['openPorts']}")
