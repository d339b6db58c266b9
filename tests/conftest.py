# tests/conftest.py
import os
import tempfile

# must be set before card_api.app is imported: logging and seeding read them
os.environ.setdefault("CARDS_LOG_DIR", tempfile.mkdtemp(prefix="card-api-logs-"))
os.environ["CARDS_DISABLE_SEED"] = "1"

import pytest
from fastapi.testclient import TestClient

from card_api.app import create_app
from card_api.ledger import ledger
from card_api.store import seed_demo, store

DEMO_CARD = "1234-5678-9012-3456"


@pytest.fixture(scope="session")
def app():
    return create_app()


@pytest.fixture(autouse=True)
def clean_state():
    # isolation between tests: demo customer + demo card only
    store.clear()
    ledger.clear()
    seed_demo(store)
    yield
    store.clear()
    ledger.clear()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def card():
    return DEMO_CARD
