# tiffin/services/admin_service.py
import hmac
import random
from typing import Dict, Any

from sqlalchemy.orm import Session

from tiffin.data.models.admin import AdminModel
from tiffin.domain.errors import ValidationError
from tiffin.repos.admin_repo import AdminRepo
from tiffin.services.identity_client import CurrentUser
from tiffin.utils.settings import ADMIN_SECURITY_CODE
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)

ADMIN_REQUIRED = "Admin privileges required"


def generate_employee_code() -> str:
    return str(random.randint(10000, 99999))


class AdminService:
    def __init__(self, db: Session):
        self.repo = AdminRepo(db)

    def is_admin(self, email: str | None) -> bool:
        if not email:
            return False
        return self.repo.get_by_email(email) is not None

    def require_admin(self, user: CurrentUser) -> AdminModel:
        admin = self.repo.get_by_email(user.email) if user.email else None
        if not admin:
            logger.warning(f"User {user.uid} denied admin access")
            raise PermissionError(ADMIN_REQUIRED)
        return admin

    def register(self, payload: Dict[str, Any]) -> AdminModel:
        """
        Rejestracja admina za kodem bezpieczenstwa.
        Konto u dostawcy tozsamosci zaklada sie osobno, tu tylko wpis do admins.
        """
        if not all(str(payload.get(f) or "").strip()
                   for f in ("first_name", "last_name", "email", "security_code")):
            raise ValidationError("All fields are required")

        if not hmac.compare_digest(str(payload["security_code"]), ADMIN_SECURITY_CODE):
            raise ValidationError("Invalid security code", {"security_code": "Invalid security code"})

        email = payload["email"].strip()
        if self.repo.get_by_email(email):
            raise ValidationError("Admin already registered", {"email": "Email already registered"})

        admin = self.repo.create_admin(
            AdminModel(
                first_name=payload["first_name"].strip(),
                last_name=payload["last_name"].strip(),
                email=email,
                code=generate_employee_code(),
            )
        )
        logger.info(f"Admin {admin.id} registered ({email})")
        return admin
