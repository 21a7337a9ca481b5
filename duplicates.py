import threading
from typing import Callable, Optional

from loguru import logger

from formatting import normalize_phone
from models import ClientSummary, ProbeResult

Lookup = Callable[[str, str], Optional[ClientSummary]]


class DuplicateProber:
    """
    Debounced duplicate check over the email and phone fields.

    Every `watch` call restarts the quiet period; only the last probe scheduled
    inside the window runs. With no lookup configured every probe is a miss.
    """

    def __init__(
        self,
        lookup: Optional[Lookup] = None,
        delay: float = 1.0,
        on_result: Optional[Callable[[ProbeResult], None]] = None,
        timer_factory=threading.Timer,
    ):
        self.lookup = lookup
        self.delay = delay
        self.on_result = on_result
        self.timer_factory = timer_factory
        self.last_result = ProbeResult()
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    def watch(self, email: str, phone: str) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            timer = self.timer_factory(self.delay, self._fire, args=(self._generation, email, phone))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def probe(self, email: str, phone: str) -> ProbeResult:
        if self.lookup is None:
            return ProbeResult()
        try:
            return ProbeResult(match=self.lookup(email, phone))
        except Exception as e:
            logger.warning(f"Duplicate lookup failed, treating as no match: {e}")
            return ProbeResult()

    @property
    def warning(self) -> Optional[str]:
        match = self.last_result.match
        if match is None:
            return None
        return f"Client found: {match.name}"

    def clear(self) -> None:
        """Drop any pending probe and forget the last match."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self.last_result = ProbeResult()

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1

    def _fire(self, generation: int, email: str, phone: str) -> None:
        if generation != self._generation:
            return
        if not email and not phone:
            return
        result = self.probe(email, normalize_phone(phone))
        with self._lock:
            if generation != self._generation:
                return
            self.last_result = result
        if self.on_result:
            self.on_result(result)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
