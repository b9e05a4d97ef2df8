"""
Whois Lookup Module
Domain registration data through python-whois
"""

import logging
import random
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

import whois

from .models import utcnow

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return [_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    return value


def _first(value: Any) -> Any:
    # Registries often repeat dates; keep the earliest one listed
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return sorted({str(v).lower() for v in value})
    return [str(value).lower()]


def shape_whois(domain: str, entry: Dict[str, Any]) -> Dict:
    """Normalise a whois record into JSON-safe dashboard fields"""
    status = entry.get('status')
    if isinstance(status, str):
        status = [status]

    return {
        'domain': domain,
        'registrar': _first(entry.get('registrar')),
        'creationDate': _json_safe(_first(entry.get('creation_date'))),
        'updatedDate': _json_safe(_first(entry.get('updated_date'))),
        'expirationDate': _json_safe(_first(entry.get('expiration_date'))),
        'nameServers': _as_list(entry.get('name_servers')),
        'status': _json_safe(status or []),
        'emails': _as_list(entry.get('emails')),
        'org': _first(entry.get('org')),
        'country': _first(entry.get('country')),
        'dnssec': _json_safe(entry.get('dnssec')),
        'raw': _json_safe({k: v for k, v in entry.items() if v is not None}),
    }


def lookup(domain: str) -> Dict:
    """Query the registry for a domain"""
    logger.info(f"Whois lookup for {domain}")
    entry = whois.whois(domain)
    results = shape_whois(domain, dict(entry))
    results['simulated'] = False
    return results


def simulate_lookup(domain: str, rng: Optional[random.Random] = None) -> Dict:
    """Mock registration record"""
    rng = rng or random.Random()
    now = utcnow()

    return {
        'domain': domain,
        'registrar': 'Example Registrar Inc.',
        'creationDate': (now - timedelta(days=3 * 365)).isoformat(),
        'updatedDate': (now - timedelta(days=30)).isoformat(),
        'expirationDate': (now + timedelta(days=365)).isoformat(),
        'nameServers': [f'ns1.{domain}', f'ns2.{domain}', f'ns3.{domain}'],
        'status': ['clientTransferProhibited', 'clientUpdateProhibited'],
        'emails': [f'admin@{domain}', f'tech@{domain}'],
        'org': 'Example Corp',
        'country': 'US',
        'dnssec': 'signedDelegation' if rng.random() > 0.5 else 'unsigned',
        'raw': {},
        'simulated': True,
    }
