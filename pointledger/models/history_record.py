from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    CHARGE = "CHARGE"
    USE = "USE"


class HistoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None  # assigned by the ledger on append
    user_id: int
    amount: int = Field(gt=0)  # magnitude; kind decides the sign
    kind: TransactionType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def delta(self) -> int:
        return self.amount if self.kind is TransactionType.CHARGE else -self.amount


def replay(records: Iterable[HistoryRecord], initial: int = 0) -> int:
    """Fold records, in the order given, into a balance."""
    balance = initial
    for record in records:
        balance += record.delta
    return balance
