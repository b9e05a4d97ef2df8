#!/usr/bin/env python3
"""
SSL Analyzer Module
Fetches a server certificate over a raw TLS handshake and grades it
"""

import random
import socket
import ssl
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import ExtensionOID, NameOID

from .models import utcnow

logger = logging.getLogger(__name__)

HANDSHAKE_TIMEOUT = 8.0
EXPIRY_WARNING_DAYS = 30
LEGACY_PROTOCOLS = ('SSLv2', 'SSLv3', 'TLSv1', 'TLSv1.1')


def hostname_from_url(url: str) -> str:
    """Accept bare hostnames as well as full URLs"""
    if '://' not in url:
        url = f'https://{url}'
    hostname = urlparse(url).hostname
    if not hostname:
        raise ValueError(f"Could not extract a hostname from {url}")
    return hostname


def fetch_certificate(hostname: str, port: int = 443,
                      timeout: float = HANDSHAKE_TIMEOUT) -> Tuple[bytes, Optional[str], Optional[str]]:
    """
    Complete a TLS handshake and return (DER certificate, protocol, cipher)

    Verification is disabled so expired or self-signed
    certificates can still be inspected.
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    with socket.create_connection((hostname, port), timeout=timeout) as sock:
        with context.wrap_socket(sock, server_hostname=hostname) as tls:
            der = tls.getpeercert(binary_form=True)
            cipher = tls.cipher()
            protocol = tls.version()

    if not der:
        raise ConnectionError(f"{hostname}:{port} did not present a certificate")
    return der, protocol, cipher[0] if cipher else None


def _name_attribute(name: x509.Name, oid) -> Optional[str]:
    attributes = name.get_attributes_for_oid(oid)
    return attributes[0].value if attributes else None


def _dns_names(cert: x509.Certificate) -> List[str]:
    try:
        san = cert.extensions.get_extension_for_oid(ExtensionOID.SUBJECT_ALTERNATIVE_NAME)
    except x509.ExtensionNotFound:
        return []
    return san.value.get_values_for_type(x509.DNSName)


def hostname_matches(hostname: str, patterns: List[str]) -> bool:
    hostname = hostname.lower().rstrip('.')
    for pattern in patterns:
        pattern = pattern.lower().rstrip('.')
        if pattern == hostname:
            return True
        # Wildcards cover exactly one label
        if pattern.startswith('*.'):
            suffix = pattern[1:]
            head, _, rest = hostname.partition('.')
            if head and '.' + rest == suffix:
                return True
    return False


def _signature_algorithm(cert: x509.Certificate) -> Optional[str]:
    key = cert.public_key()
    if isinstance(key, rsa.RSAPublicKey):
        key_type = 'RSA'
    elif isinstance(key, ec.EllipticCurvePublicKey):
        key_type = 'ECDSA'
    else:
        key_type = type(key).__name__.replace('PublicKey', '').upper()

    digest = cert.signature_hash_algorithm
    return f"{digest.name.upper()}-{key_type}" if digest else key_type


def analyze_certificate(der: bytes, hostname: str, port: int = 443,
                        protocol: Optional[str] = None, cipher: Optional[str] = None,
                        now: Optional[datetime] = None) -> Dict:
    """Turn a DER certificate plus handshake details into the report"""
    now = now or utcnow()
    cert = x509.load_der_x509_certificate(der)

    valid_from = cert.not_valid_before_utc
    valid_to = cert.not_valid_after_utc
    valid = valid_from <= now <= valid_to
    days_remaining = (valid_to - now).days

    subject_cn = _name_attribute(cert.subject, NameOID.COMMON_NAME)
    issuer_org = (_name_attribute(cert.issuer, NameOID.ORGANIZATION_NAME)
                  or _name_attribute(cert.issuer, NameOID.COMMON_NAME))

    warnings = []
    if now > valid_to:
        warnings.append('Certificate has expired')
    elif now < valid_from:
        warnings.append('Certificate is not yet valid')
    elif days_remaining <= EXPIRY_WARNING_DAYS:
        warnings.append(f'Certificate expires in {days_remaining} days')

    if cert.issuer == cert.subject:
        warnings.append('Certificate is self-signed')

    if protocol in LEGACY_PROTOCOLS:
        warnings.append(f'Legacy protocol negotiated: {protocol}')

    names = _dns_names(cert) or ([subject_cn] if subject_cn else [])
    if not hostname_matches(hostname, names):
        warnings.append(f'Certificate does not cover {hostname}')

    if not valid:
        grade = 'F'
    elif warnings:
        grade = 'B'
    else:
        grade = 'A'

    return {
        'hostname': hostname,
        'port': port,
        'valid': valid,
        'issuer': issuer_org,
        'subject': subject_cn or hostname,
        'validFrom': valid_from.isoformat(),
        'validTo': valid_to.isoformat(),
        'daysRemaining': days_remaining,
        'keySize': getattr(cert.public_key(), 'key_size', None),
        'signatureAlgorithm': _signature_algorithm(cert),
        'protocol': protocol,
        'cipherSuite': cipher,
        'grade': grade,
        'warnings': warnings,
        'simulated': False,
    }


def analyze(url: str, port: int = 443) -> Dict:
    """Inspect the certificate served for a URL"""
    hostname = hostname_from_url(url)
    logger.info(f"Analyzing TLS certificate for {hostname}:{port}")

    der, protocol, cipher = fetch_certificate(hostname, port)
    return analyze_certificate(der, hostname, port, protocol, cipher)


def simulate_analyze(url: str, port: int = 443,
                     rng: Optional[random.Random] = None) -> Dict:
    """Mock certificate report; invalid one time in five"""
    rng = rng or random.Random()
    hostname = hostname_from_url(url)
    now = utcnow()
    valid = rng.random() > 0.2

    return {
        'hostname': hostname,
        'port': port,
        'valid': valid,
        'issuer': 'DigiCert Inc',
        'subject': hostname,
        'validFrom': (now - timedelta(days=30)).isoformat(),
        'validTo': (now + timedelta(days=365)).isoformat(),
        'daysRemaining': 365,
        'keySize': 2048,
        'signatureAlgorithm': 'SHA256-RSA',
        'protocol': 'TLSv1.3',
        'cipherSuite': 'TLS_AES_256_GCM_SHA384',
        'grade': 'A' if valid else 'F',
        'warnings': [] if valid else ['Certificate has expired or is not yet valid'],
        'simulated': True,
    }
