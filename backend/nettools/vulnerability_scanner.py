"""
Vulnerability Scanner Module
Mock findings for the dashboard demo; nothing is actually scanned
"""

import logging
import random
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

SEVERITIES = ('critical', 'high', 'medium', 'low')

OUTDATED_SSH = {
    'id': 'vuln-001',
    'severity': 'high',
    'title': 'Outdated SSH Server Version',
    'description': 'The SSH server is running an outdated version that may contain security vulnerabilities.',
    'solution': 'Update SSH server to the latest version and disable weak encryption algorithms.',
    'cve': 'CVE-2023-1234',
    'port': 22,
    'service': 'SSH'
}

MISSING_HEADERS = {
    'id': 'vuln-002',
    'severity': 'medium',
    'title': 'Missing Security Headers',
    'description': 'The web server is missing important security headers like X-Frame-Options and Content-Security-Policy.',
    'solution': 'Configure web server to include proper security headers in HTTP responses.',
    'port': 80,
    'service': 'HTTP'
}

INFO_DISCLOSURE = {
    'id': 'vuln-003',
    'severity': 'low',
    'title': 'Server Information Disclosure',
    'description': 'The web server is revealing detailed version information in HTTP headers.',
    'solution': 'Configure web server to hide version information in response headers.',
    'port': 80,
    'service': 'HTTP'
}

REMOTE_CODE_EXECUTION = {
    'id': 'vuln-critical-001',
    'severity': 'critical',
    'title': 'Remote Code Execution Vulnerability',
    'description': 'A critical vulnerability allows remote code execution without authentication.',
    'solution': 'Immediately apply security patches and restart affected services.',
    'cve': 'CVE-2023-5678',
    'port': 443,
    'service': 'HTTPS'
}


def summarize(vulnerabilities: List[Dict]) -> Dict[str, int]:
    summary = {'total': len(vulnerabilities)}
    for severity in SEVERITIES:
        summary[severity] = sum(1 for v in vulnerabilities if v['severity'] == severity)
    return summary


def scan(target: str, scan_ports: bool = False, scan_ssl: bool = False,
         scan_headers: bool = False, scan_web_apps: bool = False,
         aggressive: bool = False, rng: Optional[random.Random] = None) -> Dict:
    """
    Produce a plausible-looking vulnerability report

    Each enabled check contributes its finding with a fixed probability.
    ``scan_web_apps`` is accepted for form compatibility and adds nothing.
    """
    rng = rng or random.Random()
    vulnerabilities = []

    if scan_ports and rng.random() > 0.3:
        vulnerabilities.append(dict(OUTDATED_SSH))
    if scan_headers and rng.random() > 0.4:
        vulnerabilities.append(dict(MISSING_HEADERS))
    if scan_ssl and rng.random() > 0.6:
        vulnerabilities.append(dict(INFO_DISCLOSURE))
    if aggressive and rng.random() > 0.8:
        vulnerabilities.append(dict(REMOTE_CODE_EXECUTION))

    logger.info(f"Simulated vulnerability scan of {target}: {len(vulnerabilities)} findings")

    return {
        'target': target,
        'scanTime': rng.randint(15, 44),
        'vulnerabilities': vulnerabilities,
        'summary': summarize(vulnerabilities),
        'ports': {
            'total': 1000,
            'open': rng.randint(5, 24),
            'filtered': rng.randint(2, 11)
        },
        'simulated': True,
    }
