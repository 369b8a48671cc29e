# tiffin/services/delivery_service.py
from datetime import date
from typing import Iterable, List

from sqlalchemy.orm import Session

from tiffin.data.models.subscription import SubscriptionModel
from tiffin.domain.schedule import covers
from tiffin.repos.subscription_repo import SubscriptionRepo
from tiffin.services.admin_service import AdminService
from tiffin.services.identity_client import CurrentUser
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


def build_roster(subscriptions: Iterable[SubscriptionModel], day: date) -> List[SubscriptionModel]:
    """Subskrypcje aktywne w danym dniu (obie granice wlacznie), po city_quarter rosnaco."""
    active = [s for s in subscriptions if covers(s.start_date, s.end_date, day)]
    return sorted(active, key=lambda s: s.city_quarter)


class DeliveryService:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepo(db)
        self.admin_service = AdminService(db)

    def roster(self, day: date, user: CurrentUser) -> List[SubscriptionModel]:
        self.admin_service.require_admin(user)

        deliveries = build_roster(self.repo.list_active_on(day), day)
        logger.info(f"{len(deliveries)} deliveries on {day.isoformat()}")
        return deliveries
