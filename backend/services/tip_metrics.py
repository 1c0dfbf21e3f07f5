"""
In-memory tip counters for monitoring.

Process-local and reset on restart; not a tip history.
"""
import logging
import threading
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class TipMetrics:
    """Counters updated by TipService after every call."""

    tips_sent_total: int = 0
    tips_failed_total: int = 0
    tips_unconfirmed_total: int = 0
    memo_events_total: int = 0
    memo_events_without_transfer: int = 0
    volume_total: int = 0
    platform_fees_total: int = 0
    failures_by_code: dict[str, int] = field(default_factory=dict)
    started_at: float = field(default_factory=time.monotonic)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_tip_sent(self, total: int, platform_fee: int) -> None:
        with self._lock:
            self.tips_sent_total += 1
            self.volume_total += total
            self.platform_fees_total += platform_fee

    def record_tip_failed(self, code: str) -> None:
        with self._lock:
            self.tips_failed_total += 1
            self.failures_by_code[code] = self.failures_by_code.get(code, 0) + 1

    def record_tip_unconfirmed(self) -> None:
        with self._lock:
            self.tips_unconfirmed_total += 1

    def record_memo_event(self, transfer_succeeded: bool) -> None:
        with self._lock:
            self.memo_events_total += 1
            if not transfer_succeeded:
                self.memo_events_without_transfer += 1

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "tips_sent_total": self.tips_sent_total,
                "tips_failed_total": self.tips_failed_total,
                "tips_unconfirmed_total": self.tips_unconfirmed_total,
                "memo_events_total": self.memo_events_total,
                "memo_events_without_transfer": self.memo_events_without_transfer,
                "volume_total": str(self.volume_total),
                "platform_fees_total": str(self.platform_fees_total),
                "failures_by_code": dict(self.failures_by_code),
                "uptime_seconds": round(time.monotonic() - self.started_at, 1),
            }
