import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tiffin.api.deps import get_identity_client, get_redis
from tiffin.celery_worker import celery_app
from tiffin.data.database import Base, get_db
from tiffin.data.models.admin import AdminModel
from tiffin.data.models.menu import MenuCategoryModel, MenuItemModel
from tiffin.main import create_app
from tiffin.services.identity_client import CurrentUser

celery_app.conf.task_always_eager = True

ALICE = CurrentUser(uid="alice", email="alice@example.com")
BOB = CurrentUser(uid="bob", email="bob@example.com")
CHEF = CurrentUser(uid="chef", email="chef@example.com")

TOKENS = {
    "alice-token": ALICE,
    "bob-token": BOB,
    "chef-token": CHEF,
}

CHECKOUT_FORM = {
    "first_name": "Asha",
    "last_name": "Patel",
    "address_line1": "12 Elm St",
    "address_line2": "Unit 4",
    "city": "Calgary",
    "zipcode": "T2P 1J9",
    "phone": "403-555-0199",
    "email": "asha@example.com",
}


class StaticIdentity:
    """Tokeny testowe zamiast dostawcy tozsamosci."""

    def verify_token(self, token):
        return TOKENS.get(token)


def auth(token="alice-token"):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def client(session_factory, redis_client):
    app = create_app()

    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    app.dependency_overrides[get_identity_client] = lambda: StaticIdentity()

    # bez "with", lifespan (create_all na prawdziwej bazie) sie nie odpala
    return TestClient(app)


@pytest.fixture
def menu(db):
    db.add_all([
        MenuCategoryModel(name="appetizers"),
        MenuCategoryModel(name="breads"),
        MenuCategoryModel(name="vegetarian main course"),
    ])
    db.add_all([
        MenuItemModel(id="samosa", category="appetizers", name="Samosa",
                      description="Two crisp potato samosas", price=Decimal("4.99")),
        MenuItemModel(id="naan", category="breads", name="Butter Naan",
                      description="Tandoor baked", price=Decimal("2.25")),
        MenuItemModel(id="paneer-tikka", category="vegetarian main course", name="Paneer Tikka Masala",
                      description="Cottage cheese in tomato gravy", price=Decimal("12.50")),
    ])
    db.commit()


@pytest.fixture
def admin(db):
    admin = AdminModel(first_name="Teeku", last_name="Masi", email=CHEF.email, code="15110")
    db.add(admin)
    db.commit()
    return admin
