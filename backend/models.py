"""
Pydantic models for request/response validation.
"""
from pydantic import BaseModel, ConfigDict, Field

from domain.constants import U64_MAX
from domain.tips import FeeSplit, TipReceipt


class TipBase(BaseModel):
    """Shared base — allows construction by Python name or camelCase alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Tip Requests ────────────────────────────────────────────────────
# amount is only bounded to the u64 range here; zero and overflow are
# reported by the tip core with their own error codes.


class SendTipRequest(TipBase):
    """Tip a creator; the payer is the authenticated wallet."""
    creator: str = Field(..., description="Creator wallet receiving 97%")
    platform_wallet: str = Field(
        ...,
        alias="platformWallet",
        description="Treasury wallet; must equal the configured platform wallet",
    )
    amount: int = Field(..., ge=0, le=U64_MAX, description="Total tip in microAlgos")


class SendTipWithMemoRequest(SendTipRequest):
    memo: str = Field(..., description="Free text, at most 200 UTF-8 bytes")


# ── Tip Responses ───────────────────────────────────────────────────


class FeeSplitResponse(TipBase):
    total_amount: int = Field(..., alias="totalAmount")
    platform_fee: int = Field(..., alias="platformFee")
    creator_amount: int = Field(..., alias="creatorAmount")

    @classmethod
    def from_split(cls, split: FeeSplit) -> "FeeSplitResponse":
        return cls(
            total_amount=split.total,
            platform_fee=split.platform_fee,
            creator_amount=split.creator_amount,
        )


class TipReceiptResponse(FeeSplitResponse):
    tx_id: str = Field(..., alias="txId", description="Atomic unit / group transaction ID")

    @classmethod
    def from_receipt(cls, receipt: TipReceipt) -> "TipReceiptResponse":
        return cls(
            tx_id=receipt.tx_id,
            total_amount=receipt.split.total,
            platform_fee=receipt.split.platform_fee,
            creator_amount=receipt.split.creator_amount,
        )


# ── Simulation Models ───────────────────────────────────────────────


class FundWalletRequest(TipBase):
    """Credit a wallet on the in-memory ledger (simulation only)."""
    wallet_address: str = Field(..., alias="walletAddress")
    amount: int = Field(5_000_000, gt=0, le=U64_MAX, description="microAlgos to credit")


class BalanceResponse(TipBase):
    wallet_address: str = Field(..., alias="walletAddress")
    balance: int
