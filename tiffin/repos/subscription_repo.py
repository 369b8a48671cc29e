# tiffin/repos/subscription_repo.py
from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from tiffin.data.models.subscription import SubscriptionModel


class SubscriptionRepo:
    def __init__(self, db: Session):
        self.db = db

    def create(self, subscription: SubscriptionModel) -> SubscriptionModel:
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def get(self, subscription_id: int) -> SubscriptionModel | None:
        return self.db.get(SubscriptionModel, subscription_id)

    def list_by_user(self, user_id: str) -> List[SubscriptionModel]:
        return self.db.execute(
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id)
            .order_by(SubscriptionModel.id)
        ).scalars().all()

    def list_active_on(self, day: date) -> List[SubscriptionModel]:
        return self.db.execute(
            select(SubscriptionModel).where(
                SubscriptionModel.start_date <= day,
                SubscriptionModel.end_date >= day,
            )
        ).scalars().all()

    def save(self, subscription: SubscriptionModel) -> SubscriptionModel:
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def delete(self, subscription: SubscriptionModel) -> None:
        self.db.delete(subscription)
        self.db.commit()
