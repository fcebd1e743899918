"""In-process stores. State lives for the lifetime of the process only."""

from itertools import count
from threading import Lock

from pointledger.models.history_record import HistoryRecord
from pointledger.models.point_account import PointAccount
from pointledger.storage.base import AccountStore, HistoryLedger


class InMemoryAccountStore(AccountStore):
    def __init__(self) -> None:
        self._accounts: dict[int, PointAccount] = {}
        self._lock = Lock()

    def read(self, user_id: int) -> PointAccount:
        with self._lock:
            account = self._accounts.get(user_id)
        return account if account is not None else PointAccount.empty(user_id)

    def write(self, user_id: int, account: PointAccount) -> None:
        with self._lock:
            self._accounts[user_id] = account


class InMemoryHistoryLedger(HistoryLedger):
    def __init__(self) -> None:
        self._by_user: dict[int, list[HistoryRecord]] = {}
        self._seq = count(1)
        self._total = 0
        self._lock = Lock()

    def append(self, record: HistoryRecord) -> HistoryRecord:
        with self._lock:
            # id and position are assigned together so list order == id order
            stored = record.model_copy(update={"id": next(self._seq)})
            self._by_user.setdefault(record.user_id, []).append(stored)
            self._total += 1
        return stored

    def list_by_user(self, user_id: int) -> list[HistoryRecord]:
        with self._lock:
            return list(self._by_user.get(user_id, ()))

    def count(self) -> int:
        with self._lock:
            return self._total
