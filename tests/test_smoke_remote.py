
import os

import pytest
import httpx

# ---- Configuration ----
BASE_URL = os.environ.get("CARDS_API_URL")
DEMO_CARD = os.environ.get("CARDS_SMOKE_CARD", "1234-5678-9012-3456")

@pytest.fixture(scope="session", autouse=True)
def require_base_url():
    if not BASE_URL:
        pytest.skip("Set CARDS_API_URL to a running instance, e.g. http://127.0.0.1:8000")

@pytest.fixture()
def remote():
    with httpx.Client(base_url=BASE_URL, timeout=10.0) as c:
        yield c

# ---- Tests ----
# read-mostly: a shared instance keeps its state, so nothing here asserts exact balances

def test_health(remote: httpx.Client):
    r = remote.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

def test_balance_shape(remote: httpx.Client):
    r = remote.get(f"/api/tarjetas/{DEMO_CARD}/saldo")
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"saldo", "limite", "fechaConsulta"}

def test_movements_capped(remote: httpx.Client):
    r = remote.get(f"/api/tarjetas/{DEMO_CARD}/movimientos")
    assert r.status_code == 200
    assert len(r.json()) <= 10

def test_404_for_missing_card(remote: httpx.Client):
    r = remote.get("/api/tarjetas/0000-does-not-exist/saldo")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"

def test_content_type_enforcement(remote: httpx.Client):
    r = remote.post(
        f"/api/tarjetas/{DEMO_CARD}/pagar",
        content="monto=10",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert r.status_code == 415

def test_non_positive_payment_rejected(remote: httpx.Client):
    r = remote.post(f"/api/tarjetas/{DEMO_CARD}/pagar", json={"monto": 0})
    # 403 if someone left the demo card blocked
    assert r.status_code in (400, 403)
