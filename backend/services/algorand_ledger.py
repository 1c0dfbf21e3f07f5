"""
Algorand ledger — tip legs as one atomic payment group.

Every transfer issued in a unit becomes a PaymentTxn. When the unit closes the
transactions share a group id, are signed with the payer's key and submitted
together. Algorand applies a group all-or-nothing, so a rejected creator leg
also rejects the treasury leg.

If the block inside the unit raises, nothing is submitted. A group that was
submitted but not seen confirmed raises TransferUnconfirmedError with its id.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from algosdk import encoding, transaction
from algosdk.error import AlgodHTTPError, ConfirmationTimeoutError
from algosdk.v2client import algod

from config import settings
from domain.tips import PaymentAuthorization
from exceptions import AlgorandNodeError, TransactionValidationError, TransferUnconfirmedError
from services.ledger import AtomicUnit, TransferLedger

logger = logging.getLogger(__name__)


class _GroupUnit(AtomicUnit):
    def __init__(self, sp):
        self._sp = sp
        self.tx_id = None
        self.txns: list[transaction.PaymentTxn] = []

    def transfer(self, sender: str, receiver: str, amount: int) -> None:
        if not encoding.is_valid_address(receiver):
            raise TransactionValidationError(f"Invalid destination address: {receiver[:12]}...")
        self.txns.append(
            transaction.PaymentTxn(
                sender=sender,
                sp=self._sp,
                receiver=receiver,
                amt=amount,
            )
        )


class AlgorandLedger(TransferLedger):
    backend = "algorand"

    def __init__(self, client: algod.AlgodClient | None = None, confirmation_rounds: int = 4):
        self._client = client
        self._confirmation_rounds = confirmation_rounds

    @property
    def client(self) -> algod.AlgodClient:
        """algod connection, opened on first use so simulation never touches the network."""
        if self._client is None:
            self._client = algod.AlgodClient(
                algod_token=settings.algorand_algod_token,
                algod_address=settings.algorand_algod_address,
            )
            logger.info(f"Algod client created for {settings.algorand_algod_address}")
        return self._client

    def is_healthy(self) -> bool:
        try:
            self.client.status()
            return True
        except Exception as e:
            logger.error(f"Algod health check failed: {e}")
            return False

    @contextmanager
    def atomic(self, authorization: PaymentAuthorization) -> Iterator[AtomicUnit]:
        if not authorization.signing_key:
            raise TransactionValidationError(
                f"No signing key available for payer {authorization.payer[:8]}..."
            )

        client = self.client
        try:
            sp = client.suggested_params()
        except AlgodHTTPError as e:
            logger.error(f"Could not fetch suggested params: {e}")
            raise AlgorandNodeError(str(e)) from e
        unit = _GroupUnit(sp)
        yield unit

        if not unit.txns:
            return

        if len(unit.txns) > 1:
            gid = transaction.calculate_group_id(unit.txns)
            for txn in unit.txns:
                txn.group = gid

        signed = [txn.sign(authorization.signing_key) for txn in unit.txns]

        try:
            tx_id = client.send_transactions(signed)
        except AlgodHTTPError as e:
            logger.error(f"Payment group rejected by algod: {e}")
            raise AlgorandNodeError(str(e)) from e

        # The group is in the pool from here on and may still commit
        try:
            transaction.wait_for_confirmation(client, tx_id, self._confirmation_rounds)
        except (ConfirmationTimeoutError, AlgodHTTPError) as e:
            logger.warning(f"Payment group {tx_id} submitted but not confirmed: {e}")
            raise TransferUnconfirmedError(tx_id, str(e)) from e

        unit.tx_id = tx_id
        logger.info(f"Payment group confirmed: {tx_id} ({len(signed)} txns)")
