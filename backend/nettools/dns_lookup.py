"""
DNS Lookup Module
Record queries through dnspython
"""

import logging
import random
import time
from typing import Any, Dict, Optional

import dns.resolver

from .models import InvalidToolInput

logger = logging.getLogger(__name__)

RECORD_TYPES = ('A', 'AAAA', 'MX', 'TXT', 'CNAME', 'NS', 'SRV', 'SOA')
DEFAULT_DNS_SERVER = '8.8.8.8'


def _format_rdata(record_type: str, rdata) -> Any:
    if record_type == 'MX':
        return {'priority': rdata.preference, 'exchange': rdata.exchange.to_text(omit_final_dot=True)}
    if record_type == 'TXT':
        return b''.join(rdata.strings).decode('utf-8', errors='replace')
    if record_type == 'SRV':
        return {
            'priority': rdata.priority,
            'weight': rdata.weight,
            'port': rdata.port,
            'name': rdata.target.to_text(omit_final_dot=True),
        }
    if record_type == 'SOA':
        return {
            'nsname': rdata.mname.to_text(omit_final_dot=True),
            'hostmaster': rdata.rname.to_text(omit_final_dot=True),
            'serial': rdata.serial,
            'refresh': rdata.refresh,
            'retry': rdata.retry,
            'expire': rdata.expire,
            'minttl': rdata.minimum,
        }
    if record_type in ('CNAME', 'NS'):
        return rdata.target.to_text(omit_final_dot=True)
    return rdata.to_text()


def lookup(domain: str, record_type: str = 'A', dns_server: Optional[str] = None,
           resolver: Optional[dns.resolver.Resolver] = None) -> Dict:
    """
    Resolve one record type for a domain

    NXDOMAIN and empty answers are reported as results, anything else the
    resolver raises (timeouts, no reachable nameserver) propagates.
    """
    record_type = record_type.upper()
    if record_type not in RECORD_TYPES:
        raise InvalidToolInput(f"unsupported recordType {record_type}")

    if resolver is None:
        # An explicit server needs no system resolv.conf
        resolver = dns.resolver.Resolver(configure=not dns_server)
        resolver.lifetime = 5.0
    if dns_server:
        resolver.nameservers = [dns_server]

    server = dns_server or (resolver.nameservers[0] if resolver.nameservers else None)
    status = 'NOERROR'
    records: Any = []

    started = time.perf_counter()
    try:
        answer = resolver.resolve(domain, record_type)
        records = [_format_rdata(record_type, rdata) for rdata in answer]
    except dns.resolver.NXDOMAIN:
        status = 'NXDOMAIN'
    except dns.resolver.NoAnswer:
        logger.debug(f"No {record_type} records for {domain}")
    query_time = round((time.perf_counter() - started) * 1000)

    # A zone has exactly one SOA
    if record_type == 'SOA':
        records = records[0] if records else None

    logger.info(f"DNS {record_type} lookup for {domain}: {status}")

    return {
        'domain': domain,
        'recordType': record_type,
        'records': records,
        'queryTime': query_time,
        'server': str(server) if server else None,
        'status': status,
        'simulated': False,
    }


def _sample_records(domain: str) -> Dict[str, Any]:
    return {
        'A': ['93.184.216.34', '192.0.2.1'],
        'AAAA': ['2606:2800:220:1:248:1893:25c8:1946'],
        'MX': [{'priority': 10, 'exchange': f'mail.{domain}'}],
        'TXT': ['v=spf1 include:_spf.google.com ~all', 'google-site-verification=abc123'],
        'CNAME': [domain.replace('www.', '', 1) if domain.startswith('www.') else f'www.{domain}'],
        'NS': [f'ns1.{domain}', f'ns2.{domain}'],
        'SRV': [{'priority': 10, 'weight': 5, 'port': 5060, 'name': f'sip.{domain}'}],
        'SOA': {
            'nsname': f'ns1.{domain}',
            'hostmaster': f'hostmaster.{domain}',
            'serial': 2024010101,
            'refresh': 7200,
            'retry': 3600,
            'expire': 1209600,
            'minttl': 300,
        },
    }


def simulate_lookup(domain: str, record_type: str = 'A', dns_server: Optional[str] = None,
                    rng: Optional[random.Random] = None) -> Dict:
    """Canned records with a random query time"""
    rng = rng or random.Random()
    record_type = record_type.upper()
    records = _sample_records(domain).get(record_type, [])

    return {
        'domain': domain,
        'recordType': record_type,
        'records': records,
        'queryTime': rng.randint(10, 109),
        'server': dns_server or DEFAULT_DNS_SERVER,
        'status': 'NOERROR' if records else 'NXDOMAIN',
        'simulated': True,
    }
