# tiffin/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tiffin.api.deps import get_current_user
from tiffin.data.database import get_db
from tiffin.domain.errors import NotFoundError, ValidationError
from tiffin.domain.schemas import OrderOut, StatusUpdateIn
from tiffin.services.identity_client import CurrentUser
from tiffin.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=List[OrderOut])
def my_orders(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Zamowienia zalogowanego usera, najnowsze pierwsze."""
    return get_service(db).list_for_user(user)


@router.get("/manage", response_model=List[OrderOut])
def all_orders(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_all(user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_order(order_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut)
def set_status(
    order_id: int,
    payload: StatusUpdateIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_status(order_id, payload.status, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "fields": e.fields})
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
