# tiffin/api/routers/menu.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tiffin.api.deps import get_current_user
from tiffin.data.database import get_db
from tiffin.domain.errors import NotFoundError, ValidationError
from tiffin.domain.schemas import MenuCategoryOut, MenuItemIn, MenuItemOut, MenuItemUpdate
from tiffin.services.identity_client import CurrentUser
from tiffin.services.menu_service import MenuService

router = APIRouter(prefix="/menu", tags=["menu"])


def get_service(db: Session):
    return MenuService(db)


@router.get("", response_model=List[MenuCategoryOut])
def list_menu(db: Session = Depends(get_db)):
    return get_service(db).list_menu()


@router.post("/items", response_model=MenuItemOut, status_code=201)
def create_item(
    payload: MenuItemIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create_item(user, payload.model_dump())
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/items/{item_id}", response_model=MenuItemOut)
def update_item(
    item_id: str,
    payload: MenuItemUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item(user, item_id, payload.model_dump())
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/items/{item_id}", status_code=204)
def delete_item(
    item_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_item(user, item_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
