from abc import ABC, abstractmethod

from pointledger.models.history_record import HistoryRecord
from pointledger.models.point_account import PointAccount


class AccountStore(ABC):
    @abstractmethod
    def read(self, user_id: int) -> PointAccount:
        """Return the current snapshot, or an empty account if never written."""
        ...

    @abstractmethod
    def write(self, user_id: int, account: PointAccount) -> None:
        """Replace the stored snapshot unconditionally."""
        ...


class HistoryLedger(ABC):
    @abstractmethod
    def append(self, record: HistoryRecord) -> HistoryRecord:
        """Store record; return it with its sequence id assigned."""
        ...

    @abstractmethod
    def list_by_user(self, user_id: int) -> list[HistoryRecord]:
        """Records for user, oldest first."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...


def get_stores(backend: str) -> tuple[AccountStore, HistoryLedger]:
    if backend == "memory":
        from pointledger.storage.memory import InMemoryAccountStore, InMemoryHistoryLedger
        return InMemoryAccountStore(), InMemoryHistoryLedger()
    raise ValueError(f"Unknown storage backend: {backend}")
