"""Immutable point balance snapshot; every construction path enforces the range."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pointledger.core.exceptions import InsufficientBalanceError, InvalidAmountError, LimitExceededError

MAX_BALANCE = 1_000_000_000
MIN_BALANCE = 0


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PointAccount(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int
    balance: int = 0
    updated_at: datetime = Field(default_factory=_now)

    @model_validator(mode="after")
    def check_range(self) -> "PointAccount":
        if self.balance > MAX_BALANCE:
            raise LimitExceededError(details={"user_id": self.user_id, "balance": self.balance})
        if self.balance < MIN_BALANCE:
            raise InsufficientBalanceError(details={"user_id": self.user_id, "balance": self.balance})
        return self

    @classmethod
    def empty(cls, user_id: int) -> "PointAccount":
        return cls(user_id=user_id, balance=0)

    def add(self, amount: int) -> "PointAccount":
        """Return a new snapshot with `amount` added."""
        self._require_non_negative(amount)
        new_balance = self.balance + amount
        if new_balance > MAX_BALANCE:
            raise LimitExceededError(
                details={"user_id": self.user_id, "amount": amount, "balance": self.balance},
            )
        return PointAccount(user_id=self.user_id, balance=new_balance)

    def subtract(self, amount: int) -> "PointAccount":
        """Return a new snapshot with `amount` removed."""
        self._require_non_negative(amount)
        new_balance = self.balance - amount
        if new_balance < MIN_BALANCE:
            raise InsufficientBalanceError(
                details={"user_id": self.user_id, "amount": amount, "balance": self.balance},
            )
        return PointAccount(user_id=self.user_id, balance=new_balance)

    def _require_non_negative(self, amount: int) -> None:
        if amount < 0:
            raise InvalidAmountError(details={"user_id": self.user_id, "amount": amount})
