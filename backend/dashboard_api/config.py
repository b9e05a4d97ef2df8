"""
Dashboard Configuration
Runtime settings read from environment variables
"""

import os
from dataclasses import dataclass

LIVE = 'live'
SIMULATED = 'simulated'
MODES = (LIVE, SIMULATED)


@dataclass
class Settings:
    """Server settings; every field maps to one environment variable"""

    host: str = '0.0.0.0'
    port: int = 5000
    secret_key: str = 'dev-secret-key'
    public_base_url: str = 'https://example.com'
    mode: str = LIVE
    log_level: str = 'INFO'
    cors_origins: str = '*'

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"NETDASH_MODE must be one of {', '.join(MODES)}, got {self.mode!r}")
        self.public_base_url = self.public_base_url.rstrip('/')

    @property
    def simulated(self) -> bool:
        return self.mode == SIMULATED

    @property
    def allowed_origins(self):
        """'*' or the comma-separated CORS_ORIGINS as a list"""
        if self.cors_origins.strip() == '*':
            return '*'
        return [o.strip() for o in self.cors_origins.split(',') if o.strip()]

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            host=os.environ.get('HOST', cls.host),
            port=int(os.environ.get('PORT', cls.port)),
            secret_key=os.environ.get('SECRET_KEY', cls.secret_key),
            public_base_url=os.environ.get('PUBLIC_BASE_URL', cls.public_base_url),
            mode=os.environ.get('NETDASH_MODE', cls.mode).strip().lower(),
            log_level=os.environ.get('LOG_LEVEL', cls.log_level).upper(),
            cors_origins=os.environ.get('CORS_ORIGINS', cls.cors_origins),
        )
