# tiffin/api/routers/checkout.py
import redis
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from tiffin.api.deps import get_current_user, get_redis
from tiffin.data.database import get_db
from tiffin.domain.errors import (
    CheckoutAborted,
    ConcurrencyConflict,
    DuplicateSubmission,
    NotFoundError,
    OrderWriteError,
    ValidationError,
)
from tiffin.domain.schemas import CheckoutFormIn, CheckoutStagedOut, ConfirmIn, ConfirmOut
from tiffin.services.checkout_service import CheckoutService
from tiffin.services.checkout_stash import CheckoutStash
from tiffin.services.identity_client import CurrentUser
from tiffin.services.order_guard import OrderGuard

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(db: Session, client: redis.Redis):
    return CheckoutService(
        db=db,
        guard=OrderGuard(client),
        stash=CheckoutStash(client),
    )


@router.post("", response_model=CheckoutStagedOut)
def stage_checkout(
    payload: CheckoutFormIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    """
    Waliduje formularz i odklada go do potwierdzenia.
    Pusty koszyk -> 409 z redirect_to.
    """
    svc = get_service(db, client)
    try:
        return svc.stage(user, payload.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "fields": e.fields})
    except CheckoutAborted as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "redirect_to": e.redirect_to})


@router.post("/confirm", response_model=ConfirmOut)
def confirm_checkout(
    payload: ConfirmIn,
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    """
    Tworzy zamówienie z koszyka (201) albo zwraca already_completed (200)
    jesli ten sam koszyk zostal juz zamowiony.
    """
    svc = get_service(db, client)
    try:
        result = svc.confirm(user, payload.cart_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except CheckoutAborted as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "redirect_to": e.redirect_to})
    except (DuplicateSubmission, ConcurrencyConflict) as e:
        raise HTTPException(status_code=409, detail={"message": str(e)})
    except OrderWriteError as e:
        raise HTTPException(status_code=502, detail={"message": str(e), "redirect_to": e.redirect_to})

    if result["outcome"] == "created":
        response.status_code = 201
    return result
