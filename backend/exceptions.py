"""
Exceptions raised by the value-transfer primitive (ledger adapters).

The tip core never catches these; they propagate to the caller unchanged.
"""


class AlgorandNodeError(Exception):
    """Raised when the Algorand node rejects or cannot process a payment group."""
    pass


class TransactionValidationError(Exception):
    """Raised when a transfer leg is malformed (e.g. invalid destination)."""
    pass


class InsufficientBalanceError(Exception):
    """Raised when the payer cannot cover a transfer leg."""

    def __init__(self, account: str, required: int, available: int):
        super().__init__(
            f"Insufficient balance for {account[:8]}...: "
            f"required {required}, available {available}"
        )
        self.account = account
        self.required = required
        self.available = available


class TransferUnconfirmedError(Exception):
    """
    Raised when a payment group was accepted by the node but its confirmation
    was not observed. The group may still commit; callers must not resend it.
    """

    def __init__(self, tx_id: str, reason: str = ""):
        super().__init__(f"Payment group {tx_id} submitted but not confirmed: {reason}")
        self.tx_id = tx_id
        self.reason = reason
