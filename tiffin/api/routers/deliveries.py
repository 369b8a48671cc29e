# tiffin/api/routers/deliveries.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tiffin.api.deps import get_current_user
from tiffin.data.database import get_db
from tiffin.domain.schemas import SubscriptionOut
from tiffin.services.delivery_service import DeliveryService
from tiffin.services.identity_client import CurrentUser

router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@router.get("", response_model=List[SubscriptionOut])
def deliveries_for_day(
    day: date = Query(..., alias="date"),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Lista dostaw na dany dzien posortowana po dzielnicy."""
    try:
        return DeliveryService(db).roster(day, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
