# tiffin/services/notification_service.py
from tiffin.celery_worker import celery_app
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: str, order_ref: str):
        send_order_notification_task.delay(user_id, order_ref)

    @staticmethod
    def send_subscription_notification(user_id: str, subscription_id: int):
        send_subscription_notification_task.delay(user_id, subscription_id)


@celery_app.task(name="tiffin.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_ref: str):
    """
    Potwierdzenie zamowienia - na razie tylko log, docelowo email do klienta.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order #{order_ref} has been placed")
    return {"user_id": user_id, "order_ref": order_ref, "status": "sent"}


@celery_app.task(name="tiffin.services.notification_service.send_subscription_notification_task")
def send_subscription_notification_task(user_id: str, subscription_id: int):
    logger.info(f"[NOTIFICATION] User {user_id}: Subscription {subscription_id} confirmed")
    return {"user_id": user_id, "subscription_id": subscription_id, "status": "sent"}
