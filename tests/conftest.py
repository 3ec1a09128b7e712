"""Shared fixtures: an in-memory store seeded with a small catalog and orders."""

import pytest

from factories import SERVICES, make_order
from pearlwash.config import default_config
from pearlwash.context import build_context
from pearlwash.store import MemoryStore
from web_app import create_app


@pytest.fixture
def seed():
    return {
        "services": [dict(s) for s in SERVICES],
        "orders": [
            make_order(1, status="delivered", pickup="2024-01-01", total="30.00"),
            make_order(2, status="in-progress", name="Omar Haddad", pickup="2024-02-10", total="35.00"),
            make_order(42, status="scheduled", pickup="2024-02-15", total="45.50"),
        ],
        "customers": [{"id": 1, "name": "Jane Doe", "phone": "+1 555 010 2000"}],
    }


@pytest.fixture
def store(seed):
    return MemoryStore(seed)


@pytest.fixture
def ctx(store):
    return build_context(default_config(), store)


@pytest.fixture
def app(store):
    app = create_app(default_config(), store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
