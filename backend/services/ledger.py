"""
Ledger adapters — the value-transfer primitive behind the tip core.

A ledger exposes one atomic unit per call:

    with ledger.atomic(authorization) as unit:
        unit.transfer(payer, treasury, fee)
        unit.transfer(payer, creator, rest)
    unit.tx_id  # set once the unit committed

Either every transfer in the unit takes effect or none does. That guarantee
belongs to the ledger; callers never roll back by hand.

InMemoryLedger backs simulation mode and the test suite. AlgorandLedger
(services/algorand_ledger.py) backs real deployments.
"""
import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import ContextManager, Iterator

from algosdk import encoding

from domain.tips import PaymentAuthorization
from exceptions import InsufficientBalanceError, TransactionValidationError

logger = logging.getLogger(__name__)


class AtomicUnit(ABC):
    """Transfers issued inside one all-or-nothing unit."""

    tx_id: str | None = None

    @abstractmethod
    def transfer(self, sender: str, receiver: str, amount: int) -> None:
        ...


class TransferLedger(ABC):
    backend: str = "unknown"

    @abstractmethod
    def atomic(self, authorization: PaymentAuthorization) -> ContextManager[AtomicUnit]:
        ...

    def is_healthy(self) -> bool:
        return True


# ════════════════════════════════════════════════════════════════════
# In-memory ledger (simulation mode)
# ════════════════════════════════════════════════════════════════════


class _MemoryUnit(AtomicUnit):
    def __init__(self, ledger: "InMemoryLedger"):
        self._ledger = ledger
        self.tx_id = None
        self.legs: list[tuple[str, str, int]] = []

    def transfer(self, sender: str, receiver: str, amount: int) -> None:
        if not encoding.is_valid_address(receiver):
            raise TransactionValidationError(f"Invalid destination address: {receiver[:12]}...")
        if amount < 0:
            raise TransactionValidationError(f"Negative transfer amount: {amount}")

        balances = self._ledger._balances
        available = balances.get(sender, 0)
        if available < amount:
            raise InsufficientBalanceError(sender, amount, available)

        balances[sender] = available - amount
        balances[receiver] = balances.get(receiver, 0) + amount
        self.legs.append((sender, receiver, amount))


class InMemoryLedger(TransferLedger):
    """
    Balance map with snapshot/restore atomicity.

    Units are serialized with a lock so no call sees another call's
    in-flight state.
    """

    backend = "memory"

    def __init__(self, balances: dict[str, int] | None = None):
        self._balances: dict[str, int] = dict(balances or {})
        self._lock = threading.RLock()

    def balance_of(self, wallet: str) -> int:
        with self._lock:
            return self._balances.get(wallet, 0)

    def fund(self, wallet: str, amount: int) -> int:
        """Credit a wallet out of thin air (simulation only). Returns new balance."""
        if amount <= 0:
            raise ValueError("Funding amount must be positive")
        with self._lock:
            self._balances[wallet] = self._balances.get(wallet, 0) + amount
            logger.info(f"Simulated funding: {amount} → {wallet[:8]}...")
            return self._balances[wallet]

    @contextmanager
    def atomic(self, authorization: PaymentAuthorization) -> Iterator[AtomicUnit]:
        with self._lock:
            snapshot = copy.copy(self._balances)
            unit = _MemoryUnit(self)
            try:
                yield unit
            except BaseException:
                self._balances = snapshot
                logger.info(f"Atomic unit reverted ({len(unit.legs)} legs discarded)")
                raise
            unit.tx_id = uuid.uuid4().hex.upper()
            logger.info(f"Atomic unit committed: {unit.tx_id} ({len(unit.legs)} legs)")
