# tiffin/services/subscription_service.py
from datetime import datetime, timezone
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from tiffin.data.models.subscription import SubscriptionModel
from tiffin.domain.constants import PLAN_PRICES, CityQuarter, SubscriptionType
from tiffin.domain.errors import NotFoundError, ValidationError
from tiffin.domain.schedule import calculate_end_date
from tiffin.repos.subscription_repo import SubscriptionRepo
from tiffin.services.admin_service import AdminService
from tiffin.services.identity_client import CurrentUser
from tiffin.services.notification_service import NotificationService
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_SUBSCRIPTION_FIELDS = {
    "user_name": "Name is required",
    "user_phone": "Phone number is required",
    "address_line1": "Address Line 1 is required",
    "city": "City is required",
    "province": "Province is required",
    "zipcode": "Zipcode is required",
    "city_quarter": "City Quarter is required",
    "start_date": "Start Date is required",
}

PLANS = tuple(p.value for p in SubscriptionType)
QUARTERS = tuple(q.value for q in CityQuarter)


def validate_subscription(data: Dict[str, Any]) -> Dict[str, str]:
    """Wszystkie bledy naraz, pole -> komunikat."""
    errors = {}

    if data.get("subscription_type") not in PLANS:
        errors["subscription_type"] = "Please select a subscription type"

    for field, message in REQUIRED_SUBSCRIPTION_FIELDS.items():
        if not str(data.get(field) or "").strip():
            errors[field] = message

    quarter = data.get("city_quarter")
    if quarter and quarter not in QUARTERS:
        errors["city_quarter"] = f"City Quarter must be one of: {', '.join(QUARTERS)}"

    return errors


class SubscriptionService:
    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = SubscriptionRepo(db)
        self.admin_service = AdminService(db)
        self.notification_service = notification_service or NotificationService()

    def create(self, user: CurrentUser, data: Dict[str, Any]) -> SubscriptionModel:
        errors = validate_subscription(data)
        if errors:
            raise ValidationError("Please fill in all required fields", errors)

        plan = SubscriptionType(data["subscription_type"])

        subscription = self.repo.create(
            SubscriptionModel(
                user_id=user.uid,
                subscription_type=plan.value,
                price=PLAN_PRICES[plan],
                address_line1=data["address_line1"],
                city=data["city"],
                province=data["province"],
                zipcode=data["zipcode"],
                city_quarter=data["city_quarter"],
                start_date=data["start_date"],
                end_date=calculate_end_date(data["start_date"], plan),
                meal_preferences=data.get("meal_preferences") or None,
                user_name=data["user_name"],
                user_phone=data["user_phone"],
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info(
            f"Subscription {subscription.id} ({plan.value}) created for user {user.uid}, "
            f"{subscription.start_date} - {subscription.end_date}"
        )

        try:
            self.notification_service.send_subscription_notification(user.uid, subscription.id)
        except Exception as e:
            logger.warning(f"Failed to queue notification for subscription {subscription.id}: {e}")

        return subscription

    def get(self, subscription_id: int, user: CurrentUser) -> SubscriptionModel:
        subscription = self.repo.get(subscription_id)

        if not subscription:
            raise NotFoundError("Subscription not found")

        if subscription.user_id != user.uid and not self.admin_service.is_admin(user.email):
            raise PermissionError("Subscription belongs to another user")

        return subscription

    def list_mine(self, user: CurrentUser) -> List[SubscriptionModel]:
        return self.repo.list_by_user(user.uid)

    def update(self, subscription_id: int, user: CurrentUser, changes: Dict[str, Any]) -> SubscriptionModel:
        """
        Edycja przez wlasciciela. Cena i end_date zawsze przeliczane z planu
        i daty startu, nie przyjmujemy ich od klienta.
        """
        subscription = self._owned(subscription_id, user)

        merged = {
            "subscription_type": subscription.subscription_type,
            "user_name": subscription.user_name,
            "user_phone": subscription.user_phone,
            "address_line1": subscription.address_line1,
            "city": subscription.city,
            "province": subscription.province,
            "zipcode": subscription.zipcode,
            "city_quarter": subscription.city_quarter,
            "start_date": subscription.start_date,
            "meal_preferences": subscription.meal_preferences,
        }
        merged.update({k: v for k, v in changes.items() if v is not None})

        errors = validate_subscription(merged)
        if errors:
            raise ValidationError("Please fill in all required fields", errors)

        plan = SubscriptionType(merged["subscription_type"])
        for field, value in merged.items():
            setattr(subscription, field, value)
        subscription.price = PLAN_PRICES[plan]
        subscription.end_date = calculate_end_date(merged["start_date"], plan)

        saved = self.repo.save(subscription)
        logger.info(f"Subscription {subscription_id} updated by user {user.uid}")
        return saved

    def delete(self, subscription_id: int, user: CurrentUser) -> None:
        subscription = self._owned(subscription_id, user)
        self.repo.delete(subscription)
        logger.info(f"Subscription {subscription_id} deleted by user {user.uid}")

    def _owned(self, subscription_id: int, user: CurrentUser) -> SubscriptionModel:
        subscription = self.repo.get(subscription_id)

        if not subscription:
            raise NotFoundError("Subscription not found")

        if subscription.user_id != user.uid:
            raise PermissionError("Subscription belongs to another user")

        return subscription
