"""Tests for settings, crawler files and sitemap submission."""

from datetime import date

import pytest
import requests

import submit_sitemap
from dashboard_api import seo
from dashboard_api.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ('HOST', 'PORT', 'PUBLIC_BASE_URL', 'NETDASH_MODE', 'LOG_LEVEL', 'CORS_ORIGINS'):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.port == 5000
        assert settings.mode == 'live'
        assert settings.simulated is False
        assert settings.public_base_url == 'https://example.com'
        assert settings.allowed_origins == '*'

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('PORT', '8088')
        monkeypatch.setenv('NETDASH_MODE', ' Simulated ')
        monkeypatch.setenv('PUBLIC_BASE_URL', 'https://tools.example.net/')
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        monkeypatch.setenv('CORS_ORIGINS', 'https://a.test, https://b.test')

        settings = Settings.from_env()

        assert settings.port == 8088
        assert settings.simulated is True
        assert settings.public_base_url == 'https://tools.example.net'
        assert settings.log_level == 'DEBUG'
        assert settings.allowed_origins == ['https://a.test', 'https://b.test']

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            Settings(mode='demo')


class TestCrawlerFiles:

    def test_robots(self):
        assert seo.robots_txt('https://x.test').splitlines() == [
            'User-agent: *',
            'Allow: /',
            'Disallow: /api/',
            '',
            'Sitemap: https://x.test/sitemap.xml',
        ]

    def test_sitemap_lastmod(self):
        body = seo.sitemap_xml('https://x.test', today=date(2025, 3, 9))

        assert body.count('<lastmod>2025-03-09</lastmod>') == len(seo.SITEMAP_ROUTES)
        assert '<loc>https://x.test/bandwidth-monitor</loc>' in body
        assert '<priority>0.7</priority>' in body


class FakeResponse:

    def __init__(self, status_code):
        self.status_code = status_code


class FakeSession:

    def __init__(self, fail_for=()):
        self.fail_for = fail_for
        self.requested = []

    def get(self, url, timeout):
        self.requested.append(url)
        if any(host in url for host in self.fail_for):
            raise requests.ConnectionError('unreachable')
        return FakeResponse(200)


class TestSubmitSitemap:

    def test_ping_urls_encode_sitemap(self):
        assert submit_sitemap.ping_urls('https://x.test/') == [
            'https://www.google.com/ping?sitemap=https%3A%2F%2Fx.test%2Fsitemap.xml',
            'https://www.bing.com/ping?sitemap=https%3A%2F%2Fx.test%2Fsitemap.xml',
        ]

    def test_failures_are_not_fatal(self):
        session = FakeSession(fail_for=('google',))

        statuses = submit_sitemap.submit('https://x.test', session=session)

        assert len(session.requested) == 2
        assert list(statuses.values()) == [None, 200]

    def test_requires_base_url(self, monkeypatch):
        monkeypatch.delenv('PUBLIC_BASE_URL', raising=False)
        assert submit_sitemap.main() == 1
