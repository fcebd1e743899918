from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pointledger.deps import get_point_service
from pointledger.models.history_record import HistoryRecord
from pointledger.models.point_account import PointAccount
from pointledger.services.points import PointService

router = APIRouter()


class AmountRequest(BaseModel):
    amount: int  # signed; the service rejects non-positive values


@router.get("/{user_id}", response_model=PointAccount)
def point(user_id: int, service: PointService = Depends(get_point_service)):
    """Return current balance (0 for a user never seen)."""
    return service.get_balance(user_id)


@router.get("/{user_id}/histories", response_model=list[HistoryRecord])
def histories(user_id: int, service: PointService = Depends(get_point_service)):
    """Return charge/use history, oldest first."""
    return service.get_history(user_id)


@router.patch("/{user_id}/charge", response_model=PointAccount)
def charge(user_id: int, body: AmountRequest, service: PointService = Depends(get_point_service)):
    return service.charge(user_id, body.amount)


@router.patch("/{user_id}/use", response_model=PointAccount)
def use(user_id: int, body: AmountRequest, service: PointService = Depends(get_point_service)):
    return service.use(user_id, body.amount)
