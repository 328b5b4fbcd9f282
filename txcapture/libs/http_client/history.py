import threading
from collections.abc import Iterator

from .models import Transaction
from .types import HistoryObserver


class TransactionHistory:
    """Append-only, thread-safe sequence of transactions.

    One instance can be handed to several clients (``config={"history": shared}``) so
    that every client appends to, and ``reset()`` truncates, the same collection. Appends
    are atomic: readers see either the whole transaction or nothing.
    """

    def __init__(self, transactions: list[Transaction] | None = None):
        self._transactions: list[Transaction] = list(transactions or [])
        self._lock = threading.Lock()
        self._observers: list[HistoryObserver] = []

    def subscribe(self, observer: HistoryObserver) -> None:
        """Call ``observer`` with each transaction after it has been appended."""
        self._observers.append(observer)

    def append(self, transaction: Transaction) -> None:
        with self._lock:
            self._transactions.append(transaction)
        for observer in list(self._observers):
            observer(transaction)

    def clear(self) -> None:
        # Truncate in place; holders of this handle observe the change.
        with self._lock:
            self._transactions.clear()

    def snapshot(self) -> list[Transaction]:
        with self._lock:
            return list(self._transactions)

    def last(self) -> Transaction | None:
        with self._lock:
            return self._transactions[-1] if self._transactions else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.snapshot())

    def __getitem__(self, index: int) -> Transaction:
        with self._lock:
            return self._transactions[index]

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TransactionHistory):
            return self.snapshot() == other.snapshot()
        if isinstance(other, list):
            return self.snapshot() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TransactionHistory({len(self)} transactions)"
