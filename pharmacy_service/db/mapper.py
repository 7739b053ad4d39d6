# pharmacy_service/db/mapper.py
"""
Row mapping between raw drug/category records and domain objects.

Raw rows come from ``select(...).mappings()`` over the ``drugs`` table,
optionally with the joined ``category_name`` column. They are decoded once
into :class:`DrugRow` and then converted; no validation happens beyond type
coercion.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel

from pharmacy_service.db.schemas import Category, Drug

DRUG_COLUMNS = (
    "id",
    "name",
    "description",
    "composition",
    "price",
    "stock",
    "category_id",
    "manufacturer",
    "dosage",
    "side_effects",
    "contraindications",
    "image_url",
    "requires_prescription",
    "created_at",
    "updated_at",
)


class DrugRow(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    composition: Optional[str] = None
    price: Any
    stock: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    manufacturer: Optional[str] = None
    dosage: Optional[str] = None
    side_effects: Optional[List[str]] = None
    contraindications: Optional[List[str]] = None
    image_url: Optional[str] = None
    requires_prescription: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryRow(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    count: Any = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def map_row_to_drug(row: Mapping[str, Any]) -> Drug:
    raw = DrugRow.model_validate(dict(row))
    return Drug(
        id=raw.id,
        name=raw.name,
        description=raw.description,
        composition=raw.composition,
        price=float(raw.price),
        stock=raw.stock,
        category_id=raw.category_id,
        category=raw.category_name or "",
        manufacturer=raw.manufacturer,
        dosage=raw.dosage,
        side_effects=raw.side_effects or [],
        contraindications=raw.contraindications or [],
        image_url=raw.image_url,
        requires_prescription=bool(raw.requires_prescription),
        created_at=raw.created_at,
        updated_at=raw.updated_at,
    )


def drug_to_row(drug: Drug) -> dict:
    """Canonical persisted column set of a drug (derived fields dropped)."""
    return {column: getattr(drug, column) for column in DRUG_COLUMNS}


def map_row_to_category(row: Mapping[str, Any]) -> Category:
    raw = CategoryRow.model_validate(dict(row))
    return Category(
        id=raw.id,
        name=raw.name,
        slug=raw.slug,
        description=raw.description,
        icon=raw.icon,
        count=int(raw.count or 0),
        created_at=raw.created_at,
        updated_at=raw.updated_at,
    )
