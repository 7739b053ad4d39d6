# pharmacy_service/filters.py
"""
In-memory catalog filtering over an already loaded drug and category list.

Mirrors what the storefront does on every keystroke or category change:
no I/O, stable order, synchronous.
"""

from typing import Iterable, List, Optional

from pharmacy_service.db.schemas import Category, Drug

ALL_CATEGORIES = "all"


def _matches_text(drug: Drug, needle: str) -> bool:
    for field in (drug.name, drug.description, drug.composition):
        if field and needle in field.casefold():
            return True
    return False


def resolve_category_id(categories: Iterable[Category], slug: str) -> Optional[int]:
    for category in categories:
        if category.slug == slug:
            return category.id
    return None


def filter_drugs(
    drugs: List[Drug],
    categories: List[Category],
    query: str = "",
    category_slug: str = ALL_CATEGORIES,
) -> List[Drug]:
    filtered = list(drugs)

    if query:
        needle = query.casefold()
        filtered = [drug for drug in filtered if _matches_text(drug, needle)]

    if category_slug != ALL_CATEGORIES:
        category_id = resolve_category_id(categories, category_slug)
        # unknown slug leaves the list untouched
        if category_id is not None:
            filtered = [drug for drug in filtered if drug.category_id == category_id]

    return filtered
