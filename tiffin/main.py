# tiffin/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from tiffin.data.database import Base, engine
from tiffin.data.seed import seed
from tiffin.api.routers import admins, carts, checkout, deliveries, health, menu, orders, subscriptions
from tiffin.utils.logging import get_logger

# import wszystkich modeli przed create_all
import tiffin.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    seeded = seed()
    if seeded:
        logger.info(f"Seeded {seeded} menu categories")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Tiffin Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(menu.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(subscriptions.router)
    app.include_router(deliveries.router)
    app.include_router(admins.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
