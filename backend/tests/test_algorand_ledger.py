"""
Tests for the Algorand ledger with a mocked algod client.

Tests: legs become one signed payment group, nothing is submitted when the
unit fails, algod rejections surface as AlgorandNodeError.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from unittest.mock import MagicMock, patch

import pytest
from algosdk import account, transaction
from algosdk.error import AlgodHTTPError, ConfirmationTimeoutError

from domain.tips import PaymentAuthorization
from exceptions import AlgorandNodeError, TransactionValidationError, TransferUnconfirmedError
from services.algorand_ledger import AlgorandLedger


@pytest.fixture
def payer_account():
    private_key, address = account.generate_account()
    return private_key, address


@pytest.fixture
def mock_algod_client():
    """Mock algod client returning real SuggestedParams so txns can be signed offline."""
    client = MagicMock()
    client.status.return_value = {"last-round": 1000}
    client.suggested_params.return_value = transaction.SuggestedParams(
        fee=1000,
        first=1000,
        last=2000,
        gh="SGO1GKSzyE7IEPItTxCByw9x8FmnrCDexi9/cOUJOiI=",
        gen="testnet-v1.0",
        flat_fee=True,
    )
    client.send_transactions.return_value = "GROUP_TX_ID"
    return client


class TestPaymentGroup:

    @pytest.mark.unit
    def test_two_legs_submitted_as_one_group(self, mock_algod_client, payer_account, creator_wallet, treasury_wallet):
        key, payer = payer_account
        ledger = AlgorandLedger(client=mock_algod_client)

        with patch("algosdk.transaction.wait_for_confirmation") as wait:
            with ledger.atomic(PaymentAuthorization(payer=payer, signing_key=key)) as unit:
                unit.transfer(payer, treasury_wallet, 300)
                unit.transfer(payer, creator_wallet, 9_700)

        assert unit.tx_id == "GROUP_TX_ID"
        wait.assert_called_once_with(mock_algod_client, "GROUP_TX_ID", 4)

        signed = mock_algod_client.send_transactions.call_args[0][0]
        assert len(signed) == 2
        fee_txn, creator_txn = signed[0].transaction, signed[1].transaction
        assert fee_txn.receiver == treasury_wallet and fee_txn.amt == 300
        assert creator_txn.receiver == creator_wallet and creator_txn.amt == 9_700
        assert fee_txn.group is not None
        assert fee_txn.group == creator_txn.group

    @pytest.mark.unit
    def test_failure_inside_unit_submits_nothing(self, mock_algod_client, payer_account, treasury_wallet):
        key, payer = payer_account
        ledger = AlgorandLedger(client=mock_algod_client)

        with pytest.raises(TransactionValidationError):
            with ledger.atomic(PaymentAuthorization(payer=payer, signing_key=key)) as unit:
                unit.transfer(payer, treasury_wallet, 300)
                unit.transfer(payer, "BAD-ADDRESS", 9_700)

        mock_algod_client.send_transactions.assert_not_called()

    @pytest.mark.unit
    def test_missing_signing_key_rejected_before_any_call(self, mock_algod_client, payer_wallet):
        ledger = AlgorandLedger(client=mock_algod_client)
        with pytest.raises(TransactionValidationError, match="No signing key"):
            with ledger.atomic(PaymentAuthorization(payer=payer_wallet)):
                pass
        mock_algod_client.suggested_params.assert_not_called()

    @pytest.mark.unit
    def test_algod_rejection_wrapped(self, mock_algod_client, payer_account, creator_wallet, treasury_wallet):
        key, payer = payer_account
        mock_algod_client.send_transactions.side_effect = AlgodHTTPError("overspend (account X)")
        ledger = AlgorandLedger(client=mock_algod_client)

        with pytest.raises(AlgorandNodeError, match="overspend"):
            with ledger.atomic(PaymentAuthorization(payer=payer, signing_key=key)) as unit:
                unit.transfer(payer, treasury_wallet, 300)
                unit.transfer(payer, creator_wallet, 9_700)

        assert unit.tx_id is None


    @pytest.mark.unit
    def test_confirmation_timeout_reports_submitted_group(self, mock_algod_client, payer_account, creator_wallet, treasury_wallet):
        key, payer = payer_account
        ledger = AlgorandLedger(client=mock_algod_client)

        with patch("algosdk.transaction.wait_for_confirmation", side_effect=ConfirmationTimeoutError("Wait for transaction id timed out")):
            with pytest.raises(TransferUnconfirmedError) as exc_info:
                with ledger.atomic(PaymentAuthorization(payer=payer, signing_key=key)) as unit:
                    unit.transfer(payer, treasury_wallet, 300)
                    unit.transfer(payer, creator_wallet, 9_700)

        assert exc_info.value.tx_id == "GROUP_TX_ID"
        mock_algod_client.send_transactions.assert_called_once()
        assert unit.tx_id is None

    @pytest.mark.unit
    def test_suggested_params_failure_wrapped(self, mock_algod_client, payer_account):
        key, payer = payer_account
        mock_algod_client.suggested_params.side_effect = AlgodHTTPError("service unavailable")
        ledger = AlgorandLedger(client=mock_algod_client)

        with pytest.raises(AlgorandNodeError, match="service unavailable"):
            with ledger.atomic(PaymentAuthorization(payer=payer, signing_key=key)):
                pass
        mock_algod_client.send_transactions.assert_not_called()


class TestHealth:

    @pytest.mark.unit
    def test_healthy_when_status_succeeds(self, mock_algod_client):
        assert AlgorandLedger(client=mock_algod_client).is_healthy() is True

    @pytest.mark.unit
    def test_unhealthy_when_status_raises(self, mock_algod_client):
        mock_algod_client.status.side_effect = ConnectionError("node down")
        assert AlgorandLedger(client=mock_algod_client).is_healthy() is False

    @pytest.mark.unit
    def test_client_not_created_until_used(self):
        ledger = AlgorandLedger()
        assert ledger._client is None
        assert ledger.backend == "algorand"
