"""
Tip service — validate, split, transfer, emit.

    send_tip:            guard → fee split → two ledger legs → TipEvent
    send_tip_with_memo:  memo check → send_tip (outcome recorded) → MemoEvent
                         → return recorded outcome

The memo variant publishes its MemoEvent even when the base tip failed; the
recorded outcome is only inspected after emission. That ordering is kept on
purpose and surfaced through a warning log and the
memo_events_without_transfer counter.

The service is synchronous. Route handlers call it through
services.async_executor.run_blocking.
"""
import logging

from algosdk import encoding

from config import Settings, settings as app_settings
from domain.enums import MemoFlowState
from domain.errors import MemoTooLongError, TipError
from domain.tips import FeeSplit, MemoEvent, PaymentAuthorization, TipEvent, TipReceipt, TipRequest
from exceptions import TransferUnconfirmedError
from services.event_service import Clock, EventEmitter, MemorySink, log_sink, system_clock
from services.fee_service import calculate_fee_split
from services.ledger import InMemoryLedger, TransferLedger
from services.tip_metrics import TipMetrics
from services.transfer_service import execute_split
from services.validation_service import validate_amount, validate_memo, validate_tip_request

logger = logging.getLogger(__name__)


def _error_code(error: Exception) -> str:
    return error.code if isinstance(error, TipError) else type(error).__name__


class TipService:
    def __init__(
        self,
        treasury: str,
        ledger: TransferLedger,
        emitter: EventEmitter | None = None,
        clock: Clock = system_clock,
        metrics: TipMetrics | None = None,
    ):
        if not treasury or not encoding.is_valid_address(treasury):
            raise ValueError(f"Treasury identity is not a valid Algorand address: {treasury!r}")
        self._treasury = treasury
        self.ledger = ledger
        self.emitter = emitter or EventEmitter()
        self.clock = clock
        self.metrics = metrics or TipMetrics()

    @property
    def treasury(self) -> str:
        return self._treasury

    def timestamp(self) -> int:
        try:
            return int(self.clock())
        except Exception as e:
            logger.warning(f"Clock unavailable, falling back to system time: {e}")
            return system_clock()

    def preview(self, amount: int) -> FeeSplit:
        """Fee split for an amount without moving value."""
        validate_amount(amount)
        return calculate_fee_split(amount)

    def send_tip(self, request: TipRequest, authorization: PaymentAuthorization | None) -> TipReceipt:
        """
        Send a tip with the fixed 3% platform fee.

        Raises:
            UnauthorizedError, InvalidPlatformWalletError, InvalidAmountError,
            MathOverflowError, or the ledger's own error for a rejected transfer.
        """
        try:
            validate_tip_request(request, authorization, self._treasury)
            split = calculate_fee_split(request.amount)
            tx_id = execute_split(
                self.ledger,
                split,
                payer=request.payer,
                creator=request.creator,
                treasury=self._treasury,
                authorization=authorization,
            )
        except TransferUnconfirmedError as e:
            self.metrics.record_tip_unconfirmed()
            logger.warning(
                f"Tip submitted but unconfirmed, no TipEvent emitted (tx={e.tx_id}): "
                f"payer={request.payer[:8]}... amount={request.amount}"
            )
            raise
        except Exception as e:
            self.metrics.record_tip_failed(_error_code(e))
            logger.info(f"Tip failed ({_error_code(e)}): payer={request.payer[:8]}... amount={request.amount}")
            raise

        self.emitter.emit(
            TipEvent(
                payer=request.payer,
                creator=request.creator,
                total_amount=split.total,
                platform_fee=split.platform_fee,
                creator_amount=split.creator_amount,
                timestamp=self.timestamp(),
            )
        )
        self.metrics.record_tip_sent(split.total, split.platform_fee)
        logger.info(
            f"Tip sent: {split.total} total, {split.creator_amount} to creator, "
            f"{split.platform_fee} platform fee (tx={tx_id})"
        )
        return TipReceipt(split=split, tx_id=tx_id)

    def send_tip_with_memo(
        self,
        request: TipRequest,
        authorization: PaymentAuthorization | None,
        memo: str,
    ) -> TipReceipt:
        return MemoFlow(self, request, authorization, memo).run()


class MemoFlow:
    """One run of the memo variant. `history` lists every state entered."""

    def __init__(
        self,
        service: TipService,
        request: TipRequest,
        authorization: PaymentAuthorization | None,
        memo: str,
    ):
        self.service = service
        self.request = request
        self.authorization = authorization
        self.memo = memo
        self.history: list[MemoFlowState] = []
        self._enter(MemoFlowState.VALIDATING)

    @property
    def state(self) -> MemoFlowState:
        return self.history[-1]

    def _enter(self, state: MemoFlowState) -> None:
        self.history.append(state)
        logger.debug(f"Memo flow → {state.value}")

    def run(self) -> TipReceipt:
        try:
            validate_memo(self.memo)
        except MemoTooLongError as e:
            self._enter(MemoFlowState.ABORTED)
            self.service.metrics.record_tip_failed(e.code)
            raise

        self._enter(MemoFlowState.BASE_TIP_EXECUTING)
        receipt: TipReceipt | None = None
        error: Exception | None = None
        try:
            receipt = self.service.send_tip(self.request, self.authorization)
        except Exception as e:
            error = e

        self._enter(MemoFlowState.MEMO_EVENT_EMITTING)
        self.service.emitter.emit(
            MemoEvent(
                payer=self.request.payer,
                creator=self.request.creator,
                amount=self.request.amount,
                memo=self.memo,
                timestamp=self.service.timestamp(),
            )
        )
        self.service.metrics.record_memo_event(transfer_succeeded=error is None)

        if error is not None:
            logger.warning(
                f"Memo event published for a tip that moved no value "
                f"({_error_code(error)}): payer={self.request.payer[:8]}..."
            )
            self._enter(MemoFlowState.ABORTED)
            raise error

        self._enter(MemoFlowState.DONE)
        return receipt


# ════════════════════════════════════════════════════════════════════
# Process-wide instance
# ════════════════════════════════════════════════════════════════════

_service: TipService | None = None
recent_events = MemorySink(maxlen=200)


def build_tip_service(settings: Settings) -> TipService:
    """Wire ledger and sinks for the configured mode."""
    treasury = settings.validate_platform_wallet()
    if settings.simulation_mode:
        ledger: TransferLedger = InMemoryLedger()
        emitter = EventEmitter([log_sink, recent_events])
    else:
        from services.algorand_ledger import AlgorandLedger
        ledger = AlgorandLedger(confirmation_rounds=settings.confirmation_rounds)
        emitter = EventEmitter([log_sink])
    logger.info(f"Tip service ready (ledger={ledger.backend}, treasury={treasury[:8]}...)")
    return TipService(treasury=treasury, ledger=ledger, emitter=emitter)


def get_tip_service() -> TipService:
    global _service
    if _service is None:
        _service = build_tip_service(app_settings)
    return _service


def reset_tip_service() -> None:
    global _service
    _service = None
