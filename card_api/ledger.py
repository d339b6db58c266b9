import logging
import uuid
from collections import deque
from decimal import Decimal

from .domain import RECENT_HISTORY_SIZE, Transaction

log = logging.getLogger("ledger")


class LedgerRecorder:
    """
    Keeps every recorded card mutation in two places:
      - a bounded recent history, newest first; the oldest entry falls off
      - an unbounded pending queue in arrival order, never drained here
    """

    def __init__(self, capacity: int = RECENT_HISTORY_SIZE):
        self._recent: deque[Transaction] = deque(maxlen=capacity)
        self._pending: deque[Transaction] = deque()

    def record(self, card_number: str, amount: Decimal, kind: str) -> None:
        tx = Transaction(id=str(uuid.uuid4()), tarjetaNumero=card_number, monto=amount, tipo=kind)
        self._recent.appendleft(tx)
        self._pending.append(tx)
        log.info("ledger.record card=%s kind=%s amount=%s id=%s", card_number, kind, amount, tx.id)

    def recent_history(self, card_number: str) -> list[Transaction]:
        return [tx for tx in self._recent if tx.card_number == card_number]

    def pending(self) -> list[Transaction]:
        return list(self._pending)

    def clear(self):
        self._recent.clear()
        self._pending.clear()


ledger = LedgerRecorder()
