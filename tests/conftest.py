# tests/conftest.py
from decimal import Decimal

import jwt
import pytest
import pytest_asyncio

from pharmacy_service.config import Settings
from pharmacy_service.db.database import create_engine, create_session_factory
from pharmacy_service.db.init_db import init_db
from pharmacy_service.db.models import Category, Drug, User

SECRET = "pharmacare-test-secret-0123456789abcdef"

# user ids the cart tests and tokens refer to
SHOPPER_IDS = (7, 8)


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'pharmacare.db'}",
        secret_key=SECRET,
        frontend_url="http://testserver",
    )


@pytest_asyncio.fixture(scope="function")
async def engine(settings):
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(engine):
    async with create_session_factory(engine)() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def catalog_ids(db):
    """
    Small catalog with one empty category.

    Returns a mapping of drug/category names to their ids.
    """
    analgesics = Category(name="Analgesics", slug="analgesics", description="Pain relief", icon="💊")
    antibiotics = Category(name="Antibiotics", slug="antibiotics", description="Bacterial infections", icon="🦠")
    vitamins = Category(name="Vitamins", slug="vitamins", description="Supplements", icon="🍊")
    db.add_all([analgesics, antibiotics, vitamins])

    drugs = [
        Drug(
            name="Paracetamol", description="Pain and fever relief", composition="Paracetamol 500mg",
            price=Decimal("15000.00"), stock=100, category=analgesics, manufacturer="Kimia Farma",
            dosage="3x1 tablet", side_effects=["Nausea"], contraindications=["Liver disease"],
            image_url="/img/paracetamol.png", requires_prescription=False,
        ),
        Drug(
            name="Amoxicillin", description="Antibiotic for bacterial infections", composition="Amoxicillin trihydrate",
            price=Decimal("55000.50"), stock=25, category=antibiotics, manufacturer="Sanbe Farma",
            dosage="3x1 capsule", side_effects=["Diarrhea", "Rash"], contraindications=["Penicillin allergy"],
            image_url="/img/amoxicillin.png", requires_prescription=True,
        ),
        Drug(
            name="Ibuprofen", description="Anti-inflammatory", composition="Ibuprofen 400mg",
            price=Decimal("22000"), stock=0, category=analgesics, manufacturer="Kalbe Farma",
            dosage="3x1 tablet after meals", side_effects=None, contraindications=None,
            image_url=None, requires_prescription=False,
        ),
        Drug(
            name="Bodrex", description="Headache gone 100% fast", composition="PARACETAMOL 500mg, caffeine_anhydrous",
            price=Decimal("12000"), stock=75, category=analgesics, manufacturer="Tempo Scan",
            dosage="2x1 tablet", side_effects=["Palpitations"], contraindications=[],
            image_url="/img/bodrex.png", requires_prescription=False,
        ),
    ]
    db.add_all(drugs)
    await db.commit()

    ids = {drug.name: drug.id for drug in drugs}
    ids.update({category.slug: category.id for category in (analgesics, antibiotics, vitamins)})
    return ids


def make_token(user_id, secret: str = SECRET) -> str:
    return jwt.encode({"id": user_id}, secret, algorithm="HS256")


@pytest.fixture
def auth_headers():
    def _headers(user_id: int = 7):
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers


async def add_shoppers(session) -> None:
    session.add_all([
        User(id=user_id, email=f"shopper{user_id}@example.com", password_hash="hashed", name=f"Shopper {user_id}")
        for user_id in SHOPPER_IDS
    ])
    await session.commit()


@pytest_asyncio.fixture(scope="function")
async def shoppers(db):
    """Users 7 and 8; cart rows reference users.id."""
    await add_shoppers(db)
    return SHOPPER_IDS
