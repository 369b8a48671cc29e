from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime, timezone

from tiffin.data.database import Base


class AdminModel(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    code = Column(String(5), nullable=False)  # kod pracownika
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
