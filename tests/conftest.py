"""Shared fixtures: a simulated-mode app backed by a fresh store."""

import random

import pytest

from dashboard_api.config import SIMULATED, Settings
from dashboard_app import create_app
from nettools.storage import MemoryStore


@pytest.fixture
def settings():
    return Settings(mode=SIMULATED, public_base_url='https://netdash.test/')


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def app(settings, store):
    app = create_app(settings, store)
    app.config['TESTING'] = True
    app.extensions['netdash']['tools_api'].rng = random.Random(7)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
