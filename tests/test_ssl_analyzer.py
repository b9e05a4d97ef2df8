"""Tests for certificate parsing and grading."""

from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from nettools import ssl_analyzer

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _name(common_name, org=None):
    attributes = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if org:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, org))
    return x509.Name(attributes)


def make_cert(hostnames=('example.com',), days_valid=90, days_old=30, self_signed=False):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    subject = _name(hostnames[0])
    if self_signed:
        issuer, signing_key = subject, key
    else:
        issuer = _name('Test Issuing CA', org='Test CA Inc')
        signing_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(NOW - timedelta(days=days_old))
        .not_valid_after(NOW + timedelta(days=days_valid))
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(h) for h in hostnames]),
            critical=False,
        )
        .sign(signing_key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.DER)


def test_healthy_certificate_gets_an_a():
    report = ssl_analyzer.analyze_certificate(
        make_cert(), 'example.com', protocol='TLSv1.3',
        cipher='TLS_AES_256_GCM_SHA384', now=NOW,
    )

    assert report['valid'] is True
    assert report['grade'] == 'A'
    assert report['warnings'] == []
    assert report['issuer'] == 'Test CA Inc'
    assert report['subject'] == 'example.com'
    assert report['daysRemaining'] == 90
    assert report['keySize'] == 2048
    assert report['signatureAlgorithm'] == 'SHA256-RSA'
    assert report['simulated'] is False


def test_expiring_soon_is_downgraded():
    report = ssl_analyzer.analyze_certificate(make_cert(days_valid=10), 'example.com', now=NOW)

    assert report['valid'] is True
    assert report['grade'] == 'B'
    assert 'Certificate expires in 10 days' in report['warnings']


def test_expired_certificate_fails():
    report = ssl_analyzer.analyze_certificate(
        make_cert(days_valid=-1, days_old=400), 'example.com', now=NOW,
    )

    assert report['valid'] is False
    assert report['grade'] == 'F'
    assert 'Certificate has expired' in report['warnings']


def test_not_yet_valid_certificate_fails():
    report = ssl_analyzer.analyze_certificate(
        make_cert(days_valid=30, days_old=-2), 'example.com', now=NOW,
    )

    assert report['valid'] is False
    assert 'Certificate is not yet valid' in report['warnings']


def test_self_signed_and_legacy_protocol_warnings():
    report = ssl_analyzer.analyze_certificate(
        make_cert(self_signed=True), 'example.com', protocol='TLSv1', now=NOW,
    )

    assert report['grade'] == 'B'
    assert 'Certificate is self-signed' in report['warnings']
    assert 'Legacy protocol negotiated: TLSv1' in report['warnings']


def test_hostname_mismatch():
    report = ssl_analyzer.analyze_certificate(make_cert(), 'other.org', now=NOW)

    assert 'Certificate does not cover other.org' in report['warnings']


@pytest.mark.parametrize('hostname, covered', [
    ('www.example.com', True),
    ('WWW.Example.com.', True),
    ('example.com', False),
    ('a.b.example.com', False),
])
def test_wildcard_matches_one_label(hostname, covered):
    assert ssl_analyzer.hostname_matches(hostname, ['*.example.com']) is covered


@pytest.mark.parametrize('url, hostname', [
    ('example.com', 'example.com'),
    ('https://example.com/path?q=1', 'example.com'),
    ('http://Example.com:8443', 'example.com'),
])
def test_hostname_from_url(url, hostname):
    assert ssl_analyzer.hostname_from_url(url) == hostname


def test_hostname_from_url_rejects_garbage():
    with pytest.raises(ValueError):
        ssl_analyzer.hostname_from_url('https://')


def test_analyze_uses_handshake_details(monkeypatch):
    der = make_cert(hostnames=('example.com', 'www.example.com'), days_valid=3650, days_old=0)
    seen = []

    def fake_fetch(hostname, port):
        seen.append((hostname, port))
        return der, 'TLSv1.2', 'ECDHE-RSA-AES128-GCM-SHA256'

    monkeypatch.setattr(ssl_analyzer, 'fetch_certificate', fake_fetch)

    report = ssl_analyzer.analyze('https://www.example.com/login', 8443)

    assert seen == [('www.example.com', 8443)]
    assert report['protocol'] == 'TLSv1.2'
    assert report['cipherSuite'] == 'ECDHE-RSA-AES128-GCM-SHA256'
    assert report['port'] == 8443
