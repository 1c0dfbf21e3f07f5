"""
Tests for API route endpoints.

Tests: health, tip sending (with and without memo), fee preview, metrics,
error envelopes for every tip error code, and the simulation routes.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest

from domain.constants import MAX_TIP_AMOUNT, U64_MAX
from domain.tips import MemoEvent, TipEvent


def _tip_body(creator: str, treasury: str, amount: int, **extra) -> dict:
    return {"creator": creator, "platformWallet": treasury, "amount": amount, **extra}


class TestHealthEndpoint:
    """Tests for GET /health."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_health_returns_200(self, client, treasury_wallet):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["ledger"] == "memory"
        assert data["platform_wallet"] == treasury_wallet


class TestSendTip:
    """Tests for POST /tips."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_send_tip_with_bearer_token(self, client, payer_headers, creator_wallet, treasury_wallet, ledger):
        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, treasury_wallet, 1_000_000_000),
            headers=payer_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalAmount"] == 1_000_000_000
        assert data["platformFee"] == 30_000_000
        assert data["creatorAmount"] == 970_000_000
        assert data["txId"]
        assert ledger.balance_of(creator_wallet) == 970_000_000

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_send_tip_with_legacy_header(self, client, payer_wallet, creator_wallet, treasury_wallet):
        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, treasury_wallet, 10_000),
            headers={"X-Wallet-Address": payer_wallet},
        )
        assert response.status_code == 200
        assert response.json()["data"]["platformFee"] == 300

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_emits_tip_event(self, client, payer_headers, creator_wallet, treasury_wallet, audit_sink):
        await client.post("/tips", json=_tip_body(creator_wallet, treasury_wallet, 10_000), headers=payer_headers)
        assert [type(e) for e in audit_sink.events] == [TipEvent]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_without_auth_rejected(self, client, creator_wallet, treasury_wallet):
        response = await client.post("/tips", json=_tip_body(creator_wallet, treasury_wallet, 10_000))
        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_zero_amount_returns_invalid_amount(self, client, payer_headers, creator_wallet, treasury_wallet):
        response = await client.post("/tips", json=_tip_body(creator_wallet, treasury_wallet, 0), headers=payer_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidAmount"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_overflow_returns_math_overflow(self, client, payer_headers, creator_wallet, treasury_wallet):
        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, treasury_wallet, MAX_TIP_AMOUNT + 1),
            headers=payer_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MathOverflow"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_above_u64_rejected_by_schema(self, client, payer_headers, creator_wallet, treasury_wallet):
        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, treasury_wallet, U64_MAX + 1),
            headers=payer_headers,
        )
        assert response.status_code == 422

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_wrong_platform_wallet(self, client, payer_headers, creator_wallet, make_wallet):
        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, make_wallet(), 10_000),
            headers=payer_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidPlatformWallet"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_creator_rejected(self, client, payer_headers, treasury_wallet):
        response = await client.post(
            "/tips",
            json=_tip_body("not-a-wallet", treasury_wallet, 10_000),
            headers=payer_headers,
        )
        assert response.status_code == 400
        assert "creator" in response.json()["error"]["message"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_insufficient_balance(self, client, make_wallet, creator_wallet, treasury_wallet, ledger):
        broke = make_wallet()
        ledger.fund(broke, 5_000)
        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, treasury_wallet, 10_000),
            headers={"X-Wallet-Address": broke},
        )
        assert response.status_code == 400
        assert "balance" in response.json()["error"]["message"].lower()
        assert ledger.balance_of(broke) == 5_000
        assert ledger.balance_of(treasury_wallet) == 0


class TestSendTipWithMemo:
    """Tests for POST /tips/memo."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_memo_tip_succeeds(self, client, payer_headers, creator_wallet, treasury_wallet, audit_sink):
        response = await client.post(
            "/tips/memo",
            json=_tip_body(creator_wallet, treasury_wallet, 500_000, memo="Great video!"),
            headers=payer_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["creatorAmount"] == 485_000
        assert [type(e) for e in audit_sink.events] == [TipEvent, MemoEvent]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_long_memo_returns_memo_too_long(self, client, payer_headers, creator_wallet, treasury_wallet, audit_sink):
        response = await client.post(
            "/tips/memo",
            json=_tip_body(creator_wallet, treasury_wallet, 10_000, memo="é" * 101),
            headers=payer_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MemoTooLong"
        assert audit_sink.events == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_failed_tip_still_publishes_memo_event(self, client, payer_headers, creator_wallet, treasury_wallet, audit_sink):
        response = await client.post(
            "/tips/memo",
            json=_tip_body(creator_wallet, treasury_wallet, 0, memo="zero"),
            headers=payer_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidAmount"
        assert [type(e) for e in audit_sink.events] == [MemoEvent]


class TestFeePreview:
    """Tests for GET /tips/fee-preview."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_preview(self, client, treasury_wallet):
        response = await client.get("/tips/fee-preview", params={"amount": 10_000})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == {"totalAmount": 10_000, "platformFee": 300, "creatorAmount": 9_700}
        assert body["meta"]["platformWallet"] == treasury_wallet

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_preview_zero(self, client):
        response = await client.get("/tips/fee-preview", params={"amount": 0})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidAmount"


class TestMetrics:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_metrics_count_tips(self, client, payer_headers, creator_wallet, treasury_wallet):
        await client.post("/tips", json=_tip_body(creator_wallet, treasury_wallet, 10_000), headers=payer_headers)
        response = await client.get("/tips/metrics")
        data = response.json()["data"]
        assert data["tips_sent_total"] == 1
        assert data["volume_total"] == "10000"


class TestSimulateEndpoints:
    """Tests for /simulate/*."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_fund_then_balance(self, client, make_wallet):
        wallet = make_wallet()
        response = await client.post("/simulate/fund-wallet", json={"walletAddress": wallet, "amount": 2_000_000})
        assert response.status_code == 200
        assert response.json()["data"]["balance"] == 2_000_000

        response = await client.get(f"/simulate/balance/{wallet}")
        assert response.json()["data"] == {"walletAddress": wallet, "balance": 2_000_000}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_fund_invalid_wallet(self, client):
        response = await client.post("/simulate/fund-wallet", json={"walletAddress": "bad", "amount": 1})
        assert response.status_code == 400

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_fund_non_positive_rejected(self, client, make_wallet):
        response = await client.post("/simulate/fund-wallet", json={"walletAddress": make_wallet(), "amount": 0})
        assert response.status_code == 422

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_events_endpoint(self, client):
        response = await client.get("/simulate/events", params={"limit": 5})
        assert response.status_code == 200
        body = response.json()
        assert isinstance(body["data"], list)
        assert len(body["data"]) <= 5


class TestUnconfirmedTip:
    """A submitted but unconfirmed group must not look like a retryable failure."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_returns_504_with_tx_id(self, client, service, payer_wallet, creator_wallet, treasury_wallet, payer_headers):
        from contextlib import contextmanager
        from main import app
        from deps import payer_authorization
        from domain.tips import PaymentAuthorization
        from exceptions import TransferUnconfirmedError
        from services.ledger import TransferLedger

        class PendingLedger(TransferLedger):
            backend = "pending"

            @contextmanager
            def atomic(self, authorization):
                raise TransferUnconfirmedError("GROUP_TX_ID", "timed out")
                yield

        service.ledger = PendingLedger()
        app.dependency_overrides[payer_authorization] = lambda: PaymentAuthorization(payer=payer_wallet)

        response = await client.post(
            "/tips",
            json=_tip_body(creator_wallet, treasury_wallet, 10_000),
            headers=payer_headers,
        )
        assert response.status_code == 504
        error = response.json()["error"]
        assert error["code"] == "TransferUnconfirmed"
        assert error["details"] == {"txId": "GROUP_TX_ID"}
