#!/usr/bin/env python3
"""
Ping Module
ICMP ping through the system binary, with a TCP connect fallback
"""

import math
import platform
import random
import re
import socket
import subprocess
import logging
import time
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

TIME_RE = re.compile(r'time[=<]\s*([0-9.]+)', re.IGNORECASE)
TTL_RE = re.compile(r'ttl=([0-9]+)', re.IGNORECASE)
BYTES_RE = re.compile(r'bytes=([0-9]+)|([0-9]+) bytes from', re.IGNORECASE)

# Ports tried when ICMP is unavailable
FALLBACK_PORTS = [80, 443]


def build_ping_command(host: str, count: int, timeout_ms: int,
                       system: Optional[str] = None) -> List[str]:
    """Platform-appropriate ping arguments"""
    system = (system or platform.system()).lower()
    if system == 'windows':
        return ['ping', '-n', str(count), host]
    return ['ping', '-c', str(count), '-w', str(math.ceil(timeout_ms / 1000)), host]


def parse_ping_output(output: str, host: str) -> List[Dict]:
    """
    Extract one entry per echo reply from ping's stdout

    Understands both the Unix ("64 bytes from ...: ttl=57 time=12.3 ms") and
    the Windows ("Reply from ...: bytes=32 time<1ms TTL=57") formats.
    """
    replies = []
    for line in output.splitlines():
        time_match = TIME_RE.search(line)
        if not time_match:
            continue

        ttl_match = TTL_RE.search(line)
        bytes_match = BYTES_RE.search(line)
        size = None
        if bytes_match:
            size = int(bytes_match.group(1) or bytes_match.group(2))

        replies.append({
            'sequence': len(replies) + 1,
            'host': host,
            'time': float(time_match.group(1)),
            'ttl': int(ttl_match.group(1)) if ttl_match else None,
            'bytes': size,
        })
    return replies


def summarize(replies: List[Dict], count: int) -> Dict:
    """Aggregate min/avg/max latency and loss over the replies"""
    times = [r['time'] for r in replies if r['time'] is not None and r['time'] > 0]
    received = len(replies)
    lost = max(0, count - received)

    return {
        'sent': count,
        'received': received,
        'lost': lost,
        'lossPercent': round(lost / count * 100),
        'avgTime': round(sum(times) / len(times)) if times else None,
        'minTime': min(times) if times else None,
        'maxTime': max(times) if times else None,
    }


def icmp_ping(host: str, count: int, timeout_ms: int) -> str:
    """Run the OS ping binary and return its stdout"""
    command = build_ping_command(host, count, timeout_ms)
    logger.debug(f"Running {' '.join(command)}")

    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        timeout=timeout_ms / 1000 + 1,
        check=True
    )
    return result.stdout


def tcp_ping(host: str, count: int, timeout_ms: int) -> List[Dict]:
    """
    Time TCP handshakes as a latency proxy

    At most four connections are attempted, alternating between the fallback ports.
    An attempt that fails or times out counts as lost.
    """
    replies = []
    trials = max(1, min(count, 4))

    for i in range(trials):
        port = FALLBACK_PORTS[i % len(FALLBACK_PORTS)]
        started = time.perf_counter()
        try:
            with socket.create_connection((host, port), timeout=timeout_ms / 1000):
                elapsed = (time.perf_counter() - started) * 1000
        except OSError as e:
            logger.debug(f"TCP connect {host}:{port} failed - {e}")
            continue

        replies.append({
            'sequence': len(replies) + 1,
            'host': host,
            'time': round(elapsed, 2),
            'ttl': None,
            'bytes': None,
        })
    return replies


def ping_host(host: str, count: int = 4, timeout: int = 5000) -> Dict:
    """
    Ping a host

    Args:
        host: Hostname or IP address
        count: Number of echo requests
        timeout: Overall timeout in milliseconds

    Returns:
        Dict with per-reply entries and aggregate statistics
    """
    method = 'icmp'
    try:
        output = icmp_ping(host, count, timeout)
    except subprocess.CalledProcessError as e:
        # ping exits non-zero when any reply is missing; keep what did come back
        output = e.stdout or ''
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"ICMP ping to {host} unavailable: {e}")
        output = ''

    replies = parse_ping_output(output, host)
    if not replies:
        logger.info(f"No ICMP replies from {host}, falling back to TCP connects")
        method = 'tcp'
        replies = tcp_ping(host, count, timeout)

    return {
        'pings': replies,
        'statistics': summarize(replies, count),
        'method': method,
        'simulated': False,
    }


def simulate_ping(host: str, count: int = 4, timeout: int = 5000,
                  rng: Optional[random.Random] = None) -> Dict:
    """Fabricated replies: 10-59 ms each, nothing lost"""
    rng = rng or random.Random()
    replies = [
        {'sequence': i, 'host': host, 'time': rng.randint(10, 59), 'ttl': 64, 'bytes': 32}
        for i in range(1, count + 1)
    ]
    return {
        'pings': replies,
        'statistics': summarize(replies, count),
        'method': 'simulated',
        'simulated': True,
    }
