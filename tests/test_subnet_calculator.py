"""Tests for subnet splitting arithmetic."""

import ipaddress

import pytest

from nettools.models import InvalidToolInput
from nettools.subnet_calculator import calculate, mask_to_prefix, network_class


@pytest.mark.parametrize('mask, prefix', [
    (24, 24),
    ('24', 24),
    ('/16', 16),
    ('255.255.255.192', 26),
    ('0.0.0.0', 0),
])
def test_mask_formats(mask, prefix):
    assert mask_to_prefix(mask) == prefix


@pytest.mark.parametrize('mask', ['255.0.255.0', '31', '/32', 33])
def test_rejected_masks(mask):
    with pytest.raises(InvalidToolInput):
        mask_to_prefix(mask)


def test_base_network_is_masked():
    results = calculate('172.16.5.200', 16, 2)

    assert results['originalNetwork'] == '172.16.0.0/16'
    assert results['subnetMask'] == '255.255.0.0'
    assert results['newSubnetMask'] == '255.255.128.0'
    assert results['networkClass'] == 'B'
    assert results['isPrivate'] is True


def test_borrows_enough_bits_for_uneven_counts():
    results = calculate('10.0.0.0', 24, 5)

    assert results['newPrefix'] == 27
    assert len(results['subnets']) == 5
    assert results['subnets'][-1]['network'] == '10.0.0.128/27'


@pytest.mark.parametrize('address, prefix, count', [
    ('192.168.1.0', 24, 4),
    ('10.20.0.0', 16, 7),
    ('8.8.8.8', 28, 4),
    ('100.64.0.1', 10, 256),
])
def test_subnet_invariants(address, prefix, count):
    results = calculate(address, prefix, count)
    original = ipaddress.IPv4Network(results['originalNetwork'])
    size = 2 ** (32 - results['newPrefix'])

    previous_broadcast = None
    for subnet in results['subnets']:
        network = ipaddress.IPv4Network(subnet['network'])
        first = ipaddress.IPv4Address(subnet['firstHost'])
        last = ipaddress.IPv4Address(subnet['lastHost'])
        broadcast = ipaddress.IPv4Address(subnet['broadcast'])

        assert network.subnet_of(original)
        assert first == network.network_address + 1
        assert last == broadcast - 1
        assert broadcast == network.broadcast_address
        assert subnet['hostCount'] == size - 2
        if previous_broadcast is not None:
            assert network.network_address > previous_broadcast
        previous_broadcast = broadcast

    assert results['totalHosts'] == count * (size - 2)


def test_count_that_does_not_fit():
    with pytest.raises(InvalidToolInput):
        calculate('192.168.1.0', 28, 8)


def test_single_subnet_keeps_prefix():
    results = calculate('192.168.10.9', 30, 1)

    assert results['newPrefix'] == 30
    assert results['subnets'][0]['hostCount'] == 2


@pytest.mark.parametrize('address, expected', [
    ('10.0.0.1', 'A'),
    ('191.255.0.1', 'B'),
    ('203.0.113.7', 'C'),
    ('224.0.0.5', 'D'),
    ('0.1.2.3', 'Unknown'),
])
def test_network_class(address, expected):
    assert network_class(int(ipaddress.IPv4Address(address))) == expected
