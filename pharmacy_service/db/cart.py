# pharmacy_service/db/cart.py
import logging
from typing import List

from sqlalchemy import delete, func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from pharmacy_service.db.mapper import map_row_to_drug
from pharmacy_service.db.models import CartItem, Category, Drug
from pharmacy_service.db.schemas import CartLine
from pharmacy_service.exceptions import (
    StoreUnavailable,
    ValidationError,
    require_non_negative_int,
    require_positive_int,
)

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return UPSERT_DIALECTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Cart upsert is not supported on {dialect}") from None


async def _write(db: AsyncSession, statement, what: str):
    try:
        await db.execute(statement)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Cart %s rejected by the store: %s", what, exc)
        raise ValidationError(f"Failed to {what}: unknown drug or user") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Cart %s failed: %s", what, exc)
        raise StoreUnavailable(f"Failed to {what}") from exc


async def get_cart_items(db: AsyncSession, user_id: int) -> List[CartLine]:
    """
    Cart lines of the user, each with the full drug and its category name.
    No ordering is imposed.
    """
    statement = (
        select(
            CartItem.quantity,
            *Drug.__table__.columns,
            Category.name.label("category_name"),
        )
        .select_from(CartItem)
        .join(Drug, CartItem.drug_id == Drug.id)
        .outerjoin(Category, Drug.category_id == Category.id)
        .where(CartItem.user_id == user_id)
    )
    try:
        result = await db.execute(statement)
    except SQLAlchemyError as exc:
        logger.error("Query for cart of user %s failed: %s", user_id, exc)
        raise StoreUnavailable("Failed to fetch cart") from exc
    return [
        CartLine(drug=map_row_to_drug(row), quantity=row["quantity"])
        for row in result.mappings().all()
    ]


# Добавление лекарства в корзину
async def add_to_cart(db: AsyncSession, user_id: int, drug_id: int, quantity: int):
    """Insert the line or add ``quantity`` to the existing one in one statement."""
    require_positive_int(drug_id, "drug id")
    require_positive_int(quantity, "quantity")
    insert = _insert_for(db)
    statement = insert(CartItem).values(user_id=user_id, drug_id=drug_id, quantity=quantity)
    statement = statement.on_conflict_do_update(
        index_elements=[CartItem.user_id, CartItem.drug_id],
        set_={
            "quantity": CartItem.quantity + statement.excluded.quantity,
            "updated_at": func.now(),
        },
    )
    await _write(db, statement, "add to cart")
    logger.debug("add_to_cart user=%s drug=%s +%s", user_id, drug_id, quantity)


# Обновление количества лекарства в корзине
async def update_cart_item(db: AsyncSession, user_id: int, drug_id: int, quantity: int):
    """
    Set the line's quantity. Zero removes the line; updating a line that
    does not exist changes nothing and is not an error.
    """
    require_non_negative_int(quantity, "quantity")
    if quantity == 0:
        statement = delete(CartItem).where(CartItem.user_id == user_id, CartItem.drug_id == drug_id)
    else:
        statement = (
            update(CartItem)
            .where(CartItem.user_id == user_id, CartItem.drug_id == drug_id)
            .values(quantity=quantity, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
    await _write(db, statement, "update cart")


async def clear_cart(db: AsyncSession, user_id: int):
    await _write(db, delete(CartItem).where(CartItem.user_id == user_id), "clear cart")
