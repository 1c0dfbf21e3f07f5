"""
Pytest configuration and shared fixtures for TipSplit tests.

Provides generated Algorand wallets, an in-memory ledger, a tip service with
a fixed clock and an in-memory audit sink, and an HTTP client bound to the
FastAPI app with the tip service overridden.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from algosdk import account

# ── Test Configuration ───────────────────────────────────────────────
# Settings are read once at import, so the environment is set up first.
_, TREASURY_WALLET = account.generate_account()

os.environ["PLATFORM_WALLET"] = TREASURY_WALLET
os.environ["SIMULATION_MODE"] = "true"
os.environ["DEMO_MODE"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-pytest-only"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from services.event_service import EventEmitter, MemorySink
from services.ledger import InMemoryLedger
from services.tip_metrics import TipMetrics
from services.tip_service import TipService, reset_tip_service

FIXED_TIMESTAMP = 1_700_000_000
PAYER_START_BALANCE = 10_000_000_000


def new_wallet() -> str:
    _, address = account.generate_account()
    return address


# ── Wallet Fixtures ──────────────────────────────────────────────────


@pytest.fixture
def treasury_wallet() -> str:
    return TREASURY_WALLET


@pytest.fixture
def payer_wallet() -> str:
    return new_wallet()


@pytest.fixture
def creator_wallet() -> str:
    return new_wallet()


# ── Service Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def ledger(payer_wallet) -> InMemoryLedger:
    return InMemoryLedger({payer_wallet: PAYER_START_BALANCE})


@pytest.fixture
def audit_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def service(ledger, audit_sink) -> TipService:
    return TipService(
        treasury=TREASURY_WALLET,
        ledger=ledger,
        emitter=EventEmitter([audit_sink]),
        clock=lambda: FIXED_TIMESTAMP,
        metrics=TipMetrics(),
    )


# ── HTTP Client ──────────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def client(service):
    """HTTP client against the app, with the tip service swapped for the fixture."""
    from main import app
    from deps import tip_service

    app.dependency_overrides[tip_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def payer_headers(payer_wallet) -> dict:
    from middleware.auth import issue_access_token
    return {"Authorization": f"Bearer {issue_access_token(wallet_address=payer_wallet)}"}


@pytest.fixture
def make_wallet():
    """Factory for fresh, checksum-valid Algorand addresses."""
    return new_wallet


@pytest.fixture(autouse=True)
def _fresh_tip_service():
    """Drop the process-wide tip service so no test sees another's ledger."""
    reset_tip_service()
    yield
    reset_tip_service()
