from pointledger.models.history_record import HistoryRecord, TransactionType, replay
from pointledger.models.point_account import MAX_BALANCE, PointAccount

__all__ = [
    "HistoryRecord",
    "MAX_BALANCE",
    "PointAccount",
    "TransactionType",
    "replay",
]
