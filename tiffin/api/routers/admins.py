# tiffin/api/routers/admins.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tiffin.api.deps import get_current_user
from tiffin.data.database import get_db
from tiffin.domain.errors import ValidationError
from tiffin.domain.schemas import AdminOut, AdminRegisterIn
from tiffin.services.admin_service import AdminService
from tiffin.services.identity_client import CurrentUser

router = APIRouter(prefix="/admins", tags=["admins"])


@router.post("/register", response_model=AdminOut, status_code=201)
def register_admin(payload: AdminRegisterIn, db: Session = Depends(get_db)):
    try:
        return AdminService(db).register(payload.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "fields": e.fields})


@router.get("/me", response_model=AdminOut)
def current_admin(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return AdminService(db).require_admin(user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
