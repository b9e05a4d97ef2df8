#!/usr/bin/env python3
"""
Sitemap Submission
Notifies search engines that the dashboard sitemap has changed
"""

import logging
import os
import sys
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

PING_ENDPOINTS = [
    'https://www.google.com/ping?sitemap={}',
    'https://www.bing.com/ping?sitemap={}',
]


def sitemap_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/sitemap.xml"


def ping_urls(base_url: str) -> List[str]:
    encoded = quote(sitemap_url(base_url), safe='')
    return [endpoint.format(encoded) for endpoint in PING_ENDPOINTS]


def submit(base_url: str, session: Optional[requests.Session] = None,
           timeout: float = 10) -> Dict[str, Optional[int]]:
    """
    Ping every search engine once

    Returns:
        Ping URL -> HTTP status, or None when the request failed
    """
    session = session or requests.Session()
    statuses = {}

    for url in ping_urls(base_url):
        try:
            resp = session.get(url, timeout=timeout)
            statuses[url] = resp.status_code
            logger.info(f"{url} -> {resp.status_code}")
        except requests.RequestException as e:
            statuses[url] = None
            logger.error(f"{url} -> request failed: {e}")

    return statuses


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    base_url = os.environ.get('PUBLIC_BASE_URL')
    if not base_url:
        logger.error("PUBLIC_BASE_URL is required to submit sitemap.")
        return 1

    submit(base_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
