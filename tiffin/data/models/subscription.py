from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text
from datetime import datetime, timezone

from tiffin.data.database import Base


class SubscriptionModel(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(128), nullable=False, index=True)

    subscription_type = Column(String, nullable=False)  # Weekly, Monthly
    price = Column(Numeric(10, 2), nullable=False)

    address_line1 = Column(String, nullable=False)
    city = Column(String, nullable=False)
    province = Column(String, nullable=False)
    zipcode = Column(String, nullable=False)
    city_quarter = Column(String, nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    meal_preferences = Column(Text, nullable=True)

    user_name = Column(String, nullable=False)
    user_phone = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
