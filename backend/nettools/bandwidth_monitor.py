#!/usr/bin/env python3
"""
Bandwidth Monitor Module
Interface throughput from psutil counters, or a synthetic waveform in demo mode
"""

import math
import random
import socket
import threading
import time
import logging
from typing import Dict, List, Optional, Tuple

import psutil

from .models import InvalidToolInput, utcnow

logger = logging.getLogger(__name__)

ALL_INTERFACES = 'all'
FIRST_SAMPLE_INTERVAL = 0.25  # seconds


class BandwidthMonitor:
    """Turns cumulative interface byte counters into Mbps rates"""

    def __init__(self, simulated: bool = False, rng: Optional[random.Random] = None):
        self.simulated = simulated
        self.rng = rng or random.Random()
        self.last_sample: Optional[Dict] = None
        self._previous: Dict[str, Tuple[float, int, int]] = {}
        self._tick = 0
        self._lock = threading.Lock()

    def interfaces(self) -> List[Dict]:
        """List network interfaces with their addresses and link state"""
        stats = psutil.net_if_stats()
        interfaces = []

        for name, addrs in psutil.net_if_addrs().items():
            link = stats.get(name)
            interfaces.append({
                'name': name,
                'isUp': bool(link and link.isup),
                'speed': link.speed if link else None,
                'mtu': link.mtu if link else None,
                'addresses': [
                    {'family': 'ipv4' if a.family == socket.AF_INET else 'ipv6', 'address': a.address}
                    for a in addrs if a.family in (socket.AF_INET, socket.AF_INET6)
                ],
            })
        return interfaces

    def _read_counters(self, interface: str) -> Tuple[int, int]:
        if interface == ALL_INTERFACES:
            counters = psutil.net_io_counters()
        else:
            per_nic = psutil.net_io_counters(pernic=True)
            if interface not in per_nic:
                raise InvalidToolInput(f"Unknown network interface: {interface}")
            counters = per_nic[interface]
        return counters.bytes_recv, counters.bytes_sent

    def _live_sample(self, interface: str) -> Dict:
        now = time.monotonic()
        recv, sent = self._read_counters(interface)

        previous = self._previous.get(interface)
        if previous is None:
            # No baseline yet: measure over a short window
            time.sleep(FIRST_SAMPLE_INTERVAL)
            previous = (now, recv, sent)
            now = time.monotonic()
            recv, sent = self._read_counters(interface)

        prev_time, prev_recv, prev_sent = previous
        elapsed = max(now - prev_time, 1e-6)
        self._previous[interface] = (now, recv, sent)

        return {
            'interface': interface,
            'download': round(max(recv - prev_recv, 0) * 8 / elapsed / 1_000_000, 3),
            'upload': round(max(sent - prev_sent, 0) * 8 / elapsed / 1_000_000, 3),
            'bytesRecv': recv,
            'bytesSent': sent,
            'timestamp': utcnow().isoformat(),
            'simulated': False,
        }

    def _simulated_sample(self, interface: str) -> Dict:
        self._tick += 1
        t = self._tick
        download = 20 + math.sin(t / 10) * 15 + self.rng.random() * 10
        upload = 5 + math.sin(t / 15) * 3 + self.rng.random() * 5

        # Occasional burst
        if self.rng.random() < 0.1:
            download += self.rng.random() * 30

        return {
            'interface': interface,
            'download': round(download, 3),
            'upload': round(upload, 3),
            'bytesRecv': None,
            'bytesSent': None,
            'timestamp': utcnow().isoformat(),
            'simulated': True,
        }

    def sample(self, interface: Optional[str] = None) -> Dict:
        """
        Current throughput for one interface (all interfaces by default)

        Raises:
            InvalidToolInput: interface does not exist (live mode only)
        """
        interface = interface or ALL_INTERFACES
        with self._lock:
            if self.simulated:
                sample = self._simulated_sample(interface)
            else:
                sample = self._live_sample(interface)
            self.last_sample = sample
        return sample

    def current_usage(self) -> float:
        """Download plus upload Mbps of the latest sample"""
        if not self.last_sample:
            return 0.0
        return round(self.last_sample['download'] + self.last_sample['upload'], 3)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    monitor = BandwidthMonitor()
    for iface in monitor.interfaces():
        print(f"  - {iface['name']}: {'up' if iface['isUp'] else 'down'}")
    print(monitor.sample())
