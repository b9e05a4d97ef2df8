"""
Crawler Files
robots.txt and sitemap.xml for the dashboard's client-side routes
"""

from datetime import date
from typing import Optional
from xml.sax.saxutils import escape

CACHE_CONTROL = 'public, max-age=3600, stale-while-revalidate=600'

SITEMAP_ROUTES = [
    '',
    'ping',
    'port-scanner',
    'dns-lookup',
    'speed-test',
    'network-topology',
    'ssl-analyzer',
    'subnet-calculator',
    'whois-lookup',
    'vulnerability-scanner',
    'bandwidth-monitor',
]


def robots_txt(base_url: str) -> str:
    return '\n'.join([
        'User-agent: *',
        'Allow: /',
        'Disallow: /api/',
        '',
        f'Sitemap: {base_url}/sitemap.xml',
        '',
    ])


def sitemap_xml(base_url: str, today: Optional[date] = None) -> str:
    """One <url> per dashboard page, all stamped with today's date"""
    lastmod = (today or date.today()).isoformat()
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for route in SITEMAP_ROUTES:
        loc = f'{base_url}/{route}' if route else f'{base_url}/'
        lines.extend([
            '  <url>',
            f'    <loc>{escape(loc)}</loc>',
            f'    <lastmod>{lastmod}</lastmod>',
            '    <changefreq>weekly</changefreq>',
            '    <priority>0.7</priority>',
            '  </url>',
        ])
    lines.append('</urlset>')
    return '\n'.join(lines) + '\n'
