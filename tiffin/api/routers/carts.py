# tiffin/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tiffin.api.deps import get_current_user
from tiffin.data.database import get_db
from tiffin.domain.errors import ConcurrencyConflict, NotFoundError
from tiffin.domain.schemas import CartItemIn, CartOut
from tiffin.services.cart_service import CartService
from tiffin.services.identity_client import CurrentUser

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user.uid)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(user.uid, payload.item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyConflict as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user.uid, item_id)
    except ConcurrencyConflict as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("", response_model=CartOut)
def clear_cart(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.clear(user.uid)
    except ConcurrencyConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
