# tiffin/tasks/expire.py
from datetime import datetime, timezone

from tiffin.celery_worker import celery_app
from tiffin.data.database import SessionLocal
from tiffin.data.models.cart import CartModel
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


def expire_carts(db, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)

    carts = (
        db.query(CartModel)
        .filter(
            CartModel.status == "ACTIVE",
            CartModel.expires_at < now,
        )
        .all()
    )

    logger.info(f"Found {len(carts)} carts to expire")

    for cart in carts:
        cart.status = "EXPIRED"
        cart.version = cart.version + 1
        db.add(cart)

    db.commit()
    return len(carts)


@celery_app.task(name="tiffin.tasks.expire.expire_carts_task")
def expire_carts_task():
    logger.info("Expire carts task started")

    db = SessionLocal()
    try:
        return expire_carts(db)
    finally:
        db.close()
