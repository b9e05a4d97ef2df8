"""Tests for interface throughput sampling."""

import random
from collections import namedtuple

import pytest

from nettools import bandwidth_monitor
from nettools.bandwidth_monitor import BandwidthMonitor
from nettools.models import InvalidToolInput

Counters = namedtuple('Counters', 'bytes_recv bytes_sent')


class FakeClock:

    def __init__(self):
        self.now = 100.0

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(bandwidth_monitor, 'time', clock)
    return clock


@pytest.fixture
def counters(monkeypatch):
    readings = {'total': Counters(1000, 500), 'eth0': Counters(10, 10)}

    def net_io_counters(pernic=False):
        if pernic:
            return {'eth0': readings['eth0']}
        return readings['total']

    monkeypatch.setattr(bandwidth_monitor.psutil, 'net_io_counters', net_io_counters)
    return readings


def test_first_sample_measures_short_window(clock, counters):
    monitor = BandwidthMonitor()
    original_sleep = clock.sleep

    def sleep_and_count(seconds):
        original_sleep(seconds)
        counters['total'] = Counters(1000 + 31250, 500 + 12500)

    clock.sleep = sleep_and_count

    sample = monitor.sample()

    assert sample['interface'] == 'all'
    assert sample['download'] == pytest.approx(1.0)
    assert sample['upload'] == pytest.approx(0.4)
    assert sample['simulated'] is False


def test_later_samples_use_previous_reading(clock, counters):
    monitor = BandwidthMonitor()
    monitor.sample('eth0')

    clock.now += 2
    counters['eth0'] = Counters(10 + 250000, 10)
    sample = monitor.sample('eth0')

    assert sample['download'] == pytest.approx(1.0)
    assert sample['upload'] == 0
    assert monitor.current_usage() == pytest.approx(1.0)


def test_unknown_interface(clock, counters):
    with pytest.raises(InvalidToolInput):
        BandwidthMonitor().sample('wlan9')


def test_simulated_samples_are_plausible():
    monitor = BandwidthMonitor(simulated=True, rng=random.Random(5))

    samples = [monitor.sample() for _ in range(50)]

    assert all(s['simulated'] for s in samples)
    assert all(0 < s['download'] < 80 for s in samples)
    assert all(0 < s['upload'] < 15 for s in samples)


def test_usage_is_zero_before_sampling():
    assert BandwidthMonitor(simulated=True).current_usage() == 0.0


def test_interfaces(monkeypatch):
    import socket

    Addr = namedtuple('Addr', 'family address')
    Stat = namedtuple('Stat', 'isup speed mtu')
    monkeypatch.setattr(bandwidth_monitor.psutil, 'net_if_addrs', lambda: {
        'lo': [Addr(socket.AF_INET, '127.0.0.1'), Addr(socket.AF_INET6, '::1')],
    })
    monkeypatch.setattr(bandwidth_monitor.psutil, 'net_if_stats', lambda: {
        'lo': Stat(True, 0, 65536),
    })

    assert BandwidthMonitor().interfaces() == [{
        'name': 'lo',
        'isUp': True,
        'speed': 0,
        'mtu': 65536,
        'addresses': [
            {'family': 'ipv4', 'address': '127.0.0.1'},
            {'family': 'ipv6', 'address': '::1'},
        ],
    }]
