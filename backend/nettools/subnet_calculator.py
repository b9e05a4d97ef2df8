"""
Subnet Calculator Module
Splits an IPv4 network into equal subnets using plain integer arithmetic
"""

import ipaddress
import logging
from typing import Dict, List, Union

from .models import InvalidToolInput

logger = logging.getLogger(__name__)

MAX_PREFIX = 30  # /31 and /32 leave no usable host pair
FULL_MASK = 0xFFFFFFFF

PRIVATE_NETWORKS = [
    ipaddress.IPv4Network('10.0.0.0/8'),
    ipaddress.IPv4Network('172.16.0.0/12'),
    ipaddress.IPv4Network('192.168.0.0/16'),
]


def prefix_to_mask(prefix: int) -> int:
    return (FULL_MASK << (32 - prefix)) & FULL_MASK if prefix else 0


def int_to_ip(value: int) -> str:
    return str(ipaddress.IPv4Address(value))


def mask_to_prefix(mask: Union[str, int]) -> int:
    """
    Parse a subnet mask given as 24, "24", "/24" or "255.255.255.0"

    Raises InvalidToolInput for non-contiguous or out of range masks.
    """
    if isinstance(mask, int):
        prefix = mask
    else:
        text = str(mask).strip().lstrip('/')
        if '.' in text:
            value = int(ipaddress.IPv4Address(text))
            prefix = bin(value).count('1')
            if prefix_to_mask(prefix) != value:
                raise InvalidToolInput(f"non-contiguous subnet mask {text}")
        else:
            prefix = int(text)

    if not 0 <= prefix <= MAX_PREFIX:
        raise InvalidToolInput(f"mask bits must be between 0 and {MAX_PREFIX}")
    return prefix


def network_class(address: int) -> str:
    first_octet = address >> 24
    if 1 <= first_octet <= 126:
        return 'A'
    if 128 <= first_octet <= 191:
        return 'B'
    if 192 <= first_octet <= 223:
        return 'C'
    if 224 <= first_octet <= 239:
        return 'D'
    if 240 <= first_octet <= 255:
        return 'E'
    return 'Unknown'


def is_private(address: int) -> bool:
    ip = ipaddress.IPv4Address(address)
    return any(ip in network for network in PRIVATE_NETWORKS)


def split_network(base: int, prefix: int, subnet_count: int) -> List[Dict]:
    """
    Carve subnet_count equal subnets out of base/prefix

    Enough host bits are borrowed to fit the count, so consecutive
    subnets never overlap and all stay inside the original network.
    """
    borrowed = (subnet_count - 1).bit_length()
    new_prefix = prefix + borrowed
    if new_prefix > MAX_PREFIX:
        raise InvalidToolInput(
            f"cannot fit {subnet_count} subnets into a /{prefix} network"
        )

    size = 1 << (32 - new_prefix)
    subnets = []
    for i in range(subnet_count):
        network = base + i * size
        broadcast = network + size - 1
        subnets.append({
            'subnetNumber': i + 1,
            'network': f'{int_to_ip(network)}/{new_prefix}',
            'firstHost': int_to_ip(network + 1),
            'lastHost': int_to_ip(broadcast - 1),
            'broadcast': int_to_ip(broadcast),
            'hostCount': size - 2,
        })
    return subnets


def calculate(ip_address: str, subnet_mask: Union[str, int], subnet_count: int = 4) -> Dict:
    """
    Subnet an IPv4 network

    Args:
        ip_address: Any address inside the network to split
        subnet_mask: Prefix length or dotted mask of that network
        subnet_count: Number of equal subnets wanted

    Returns:
        Dict describing the original network and every subnet
    """
    if subnet_count < 1:
        raise InvalidToolInput("subnetCount must be at least 1")

    prefix = mask_to_prefix(subnet_mask)
    address = int(ipaddress.IPv4Address(ip_address))
    base = address & prefix_to_mask(prefix)

    subnets = split_network(base, prefix, subnet_count)
    new_prefix = prefix + (subnet_count - 1).bit_length()
    logger.debug(f"Split {int_to_ip(base)}/{prefix} into {subnet_count} x /{new_prefix}")

    return {
        'originalNetwork': f'{int_to_ip(base)}/{prefix}',
        'subnetMask': int_to_ip(prefix_to_mask(prefix)),
        'newPrefix': new_prefix,
        'newSubnetMask': int_to_ip(prefix_to_mask(new_prefix)),
        'networkClass': network_class(address),
        'isPrivate': is_private(address),
        'subnets': subnets,
        'totalHosts': sum(s['hostCount'] for s in subnets),
        'simulated': False,
    }
