"""
Tip domain records.

None of these outlive a single call except as audit events handed to the
event channel.
"""
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class PaymentAuthorization:
    """
    Credential proving the payer authorized this transfer.

    Verification happens upstream (JWT auth); the core only refuses to run
    without one. `signing_key` is needed by ledgers that sign on the payer's
    behalf (Algorand demo mode) and is never logged.
    """
    payer: str
    signing_key: str | None = None

    def __repr__(self) -> str:
        return f"PaymentAuthorization(payer={self.payer!r})"


@dataclass(frozen=True)
class TipRequest:
    payer: str
    creator: str
    treasury: str
    amount: int


@dataclass(frozen=True)
class FeeSplit:
    """Result of the 3% fee calculation. platform_fee + creator_amount == total."""
    total: int
    platform_fee: int
    creator_amount: int


@dataclass(frozen=True)
class TipReceipt:
    split: FeeSplit
    tx_id: str


@dataclass(frozen=True)
class TipEvent:
    """Audit record for one successful tip."""
    payer: str
    creator: str
    total_amount: int
    platform_fee: int
    creator_amount: int
    timestamp: int

    name = "TipSent"

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class MemoEvent:
    """Audit record for a memo-carrying tip call."""
    payer: str
    creator: str
    amount: int
    memo: str
    timestamp: int

    name = "TipWithMemo"

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.name, **asdict(self)}
