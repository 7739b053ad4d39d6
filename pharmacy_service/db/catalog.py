# pharmacy_service/db/catalog.py
import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from pharmacy_service.db.mapper import map_row_to_category, map_row_to_drug
from pharmacy_service.db.models import Category, Drug
from pharmacy_service.db.schemas import Category as CategorySchema, Drug as DrugSchema
from pharmacy_service.exceptions import StoreUnavailable, require_positive_int

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def like_pattern(term: str) -> str:
    """Wrap ``term`` for a literal substring ILIKE match."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def drug_query():
    """Every drug column plus the joined category name."""
    return (
        select(*Drug.__table__.columns, Category.name.label("category_name"))
        .select_from(Drug)
        .outerjoin(Category, Drug.category_id == Category.id)
    )


def category_query():
    return (
        select(*Category.__table__.columns, func.count(Drug.id).label("count"))
        .select_from(Category)
        .outerjoin(Drug, Drug.category_id == Category.id)
        .group_by(Category.id)
    )


async def _fetch_all(db: AsyncSession, statement, what: str):
    try:
        result = await db.execute(statement)
    except SQLAlchemyError as exc:
        logger.error("Query for %s failed: %s", what, exc)
        raise StoreUnavailable(f"Failed to fetch {what}") from exc
    return result.mappings().all()


# Получение всех лекарств
async def get_all_drugs(db: AsyncSession) -> List[DrugSchema]:
    rows = await _fetch_all(db, drug_query().order_by(Drug.name), "drugs")
    logger.debug("get_all_drugs: %d rows", len(rows))
    return [map_row_to_drug(row) for row in rows]


# Получение одного лекарства
async def get_drug_by_id(db: AsyncSession, drug_id) -> Optional[DrugSchema]:
    if isinstance(drug_id, bool) or not isinstance(drug_id, int) or drug_id <= 0:
        return None
    rows = await _fetch_all(db, drug_query().where(Drug.id == drug_id), "drug")
    return map_row_to_drug(rows[0]) if rows else None


async def search_drugs(db: AsyncSession, term: str) -> List[DrugSchema]:
    pattern = like_pattern(term or "")
    statement = (
        drug_query()
        .where(
            or_(
                Drug.name.ilike(pattern, escape=LIKE_ESCAPE),
                Drug.description.ilike(pattern, escape=LIKE_ESCAPE),
                Drug.composition.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        .order_by(Drug.name)
    )
    rows = await _fetch_all(db, statement, "drugs")
    logger.debug("search_drugs %r: %d rows", term, len(rows))
    return [map_row_to_drug(row) for row in rows]


async def get_drugs_by_category(db: AsyncSession, category_id) -> List[DrugSchema]:
    require_positive_int(category_id, "category id")
    statement = drug_query().where(Drug.category_id == category_id).order_by(Drug.name)
    rows = await _fetch_all(db, statement, "drugs")
    return [map_row_to_drug(row) for row in rows]


async def get_all_categories(db: AsyncSession) -> List[CategorySchema]:
    rows = await _fetch_all(db, category_query().order_by(Category.name), "categories")
    return [map_row_to_category(row) for row in rows]


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[CategorySchema]:
    rows = await _fetch_all(db, category_query().where(Category.slug == slug), "category")
    return map_row_to_category(rows[0]) if rows else None
