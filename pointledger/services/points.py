"""Point balance charge/use with per-user serialization and an append-only history."""

from dataclasses import dataclass

from pointledger.core.exceptions import AppError, InvalidAmountError
from pointledger.core.locking import KeyedLock
from pointledger.core.logging import get_logger
from pointledger.models.history_record import HistoryRecord, TransactionType, replay
from pointledger.models.point_account import PointAccount
from pointledger.storage.base import AccountStore, HistoryLedger

log = get_logger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    user_id: int
    stored_balance: int
    replayed_balance: int

    @property
    def consistent(self) -> bool:
        return self.stored_balance == self.replayed_balance


class PointService:
    """
    Every read-modify-write of a user's account runs under that user's lock,
    and the store write plus ledger append happen inside the same critical
    section. Reads take the same lock so they never see a balance without
    its history record (or the reverse). Different users never contend.
    """

    def __init__(self, accounts: AccountStore, ledger: HistoryLedger, locks: KeyedLock | None = None) -> None:
        self.accounts = accounts
        self.ledger = ledger
        self.locks = locks or KeyedLock()

    def get_balance(self, user_id: int) -> PointAccount:
        with self.locks.hold(user_id):
            return self.accounts.read(user_id)

    def get_history(self, user_id: int) -> list[HistoryRecord]:
        with self.locks.hold(user_id):
            return self.ledger.list_by_user(user_id)

    def charge(self, user_id: int, amount: int) -> PointAccount:
        return self._mutate(user_id, amount, TransactionType.CHARGE)

    def use(self, user_id: int, amount: int) -> PointAccount:
        return self._mutate(user_id, amount, TransactionType.USE)

    def reconcile(self, user_id: int) -> ReconcileResult:
        """Compare the stored balance with a replay of the user's history."""
        with self.locks.hold(user_id):
            stored = self.accounts.read(user_id).balance
            records = self.ledger.list_by_user(user_id)
        result = ReconcileResult(user_id=user_id, stored_balance=stored, replayed_balance=replay(records))
        if not result.consistent:
            log.error(
                "points_inconsistent",
                user_id=user_id,
                stored_balance=result.stored_balance,
                replayed_balance=result.replayed_balance,
            )
        return result

    def _mutate(self, user_id: int, amount: int, kind: TransactionType) -> PointAccount:
        # Rejected before locking: a non-positive amount can never succeed.
        if amount <= 0:
            log.warning("points_rejected", user_id=user_id, kind=kind.value, amount=amount, code="INVALID_AMOUNT")
            raise InvalidAmountError(details={"user_id": user_id, "amount": amount})
        try:
            with self.locks.hold(user_id):
                current = self.accounts.read(user_id)
                if kind is TransactionType.CHARGE:
                    updated = current.add(amount)
                else:
                    updated = current.subtract(amount)
                record = HistoryRecord(user_id=user_id, amount=amount, kind=kind, timestamp=updated.updated_at)
                self.accounts.write(user_id, updated)
                self.ledger.append(record)
        except AppError as exc:
            log.warning("points_rejected", user_id=user_id, kind=kind.value, amount=amount, code=exc.code)
            raise
        log.info(
            "points_charged" if kind is TransactionType.CHARGE else "points_used",
            user_id=user_id,
            amount=amount,
            balance=updated.balance,
        )
        return updated
