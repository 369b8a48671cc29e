from sqlalchemy import select
from sqlalchemy.orm import Session

from tiffin.data.models.admin import AdminModel


class AdminRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> AdminModel | None:
        return self.db.execute(
            select(AdminModel).where(AdminModel.email == email)
        ).scalar_one_or_none()

    def create_admin(self, admin: AdminModel) -> AdminModel:
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)
        return admin
