# tests/test_catalog.py
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacy_service.db import catalog
from pharmacy_service.db.catalog import like_pattern
from pharmacy_service.exceptions import StoreUnavailable, ValidationError


def names(drugs):
    return [drug.name for drug in drugs]


@pytest.mark.asyncio
async def test_empty_store_returns_empty_lists(db) -> None:
    assert await catalog.get_all_drugs(db) == []
    assert await catalog.get_all_categories(db) == []
    assert await catalog.search_drugs(db, "para") == []


@pytest.mark.asyncio
async def test_all_drugs_ordered_by_name_with_category(db, catalog_ids) -> None:
    drugs = await catalog.get_all_drugs(db)

    assert names(drugs) == ["Amoxicillin", "Bodrex", "Ibuprofen", "Paracetamol"]
    by_name = {drug.name: drug for drug in drugs}
    assert by_name["Amoxicillin"].category == "Antibiotics"
    assert by_name["Amoxicillin"].price == 55000.5
    assert by_name["Ibuprofen"].side_effects == []
    assert by_name["Ibuprofen"].contraindications == []


@pytest.mark.asyncio
async def test_drug_by_id(db, catalog_ids) -> None:
    drug = await catalog.get_drug_by_id(db, catalog_ids["Paracetamol"])

    assert drug is not None
    assert drug.name == "Paracetamol"
    assert drug.category == "Analgesics"
    assert drug.category_id == catalog_ids["analgesics"]
    assert drug.side_effects == ["Nausea"]


@pytest.mark.asyncio
@pytest.mark.parametrize("drug_id", [0, -1, 9999, "1", None, True])
async def test_drug_by_bad_or_unknown_id_is_not_found(db, catalog_ids, drug_id) -> None:
    assert await catalog.get_drug_by_id(db, drug_id) is None


@pytest.mark.asyncio
async def test_search_matches_name_description_and_composition(db, catalog_ids) -> None:
    # Bodrex matches through its upper-case composition only
    assert names(await catalog.search_drugs(db, "para")) == ["Bodrex", "Paracetamol"]
    assert names(await catalog.search_drugs(db, "PAIN")) == ["Paracetamol"]
    assert names(await catalog.search_drugs(db, "infections")) == ["Amoxicillin"]
    assert names(await catalog.search_drugs(db, "no such drug")) == []


@pytest.mark.asyncio
async def test_empty_search_matches_everything(db, catalog_ids) -> None:
    assert names(await catalog.search_drugs(db, "")) == names(await catalog.get_all_drugs(db))


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(db, catalog_ids) -> None:
    assert names(await catalog.search_drugs(db, "%")) == ["Bodrex"]
    assert names(await catalog.search_drugs(db, "_")) == ["Bodrex"]


def test_like_pattern_escapes() -> None:
    assert like_pattern("para") == "%para%"
    assert like_pattern("") == "%%"
    assert like_pattern("10%_a\\b") == "%10\\%\\_a\\\\b%"


@pytest.mark.asyncio
async def test_drugs_by_category(db, catalog_ids) -> None:
    drugs = await catalog.get_drugs_by_category(db, catalog_ids["analgesics"])
    assert names(drugs) == ["Bodrex", "Ibuprofen", "Paracetamol"]
    assert await catalog.get_drugs_by_category(db, catalog_ids["vitamins"]) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("category_id", [0, -3, "2", 1.5])
async def test_drugs_by_category_rejects_bad_ids(db, category_id) -> None:
    with pytest.raises(ValidationError):
        await catalog.get_drugs_by_category(db, category_id)


@pytest.mark.asyncio
async def test_categories_have_counts_including_zero(db, catalog_ids) -> None:
    categories = await catalog.get_all_categories(db)

    assert [(c.name, c.count) for c in categories] == [
        ("Analgesics", 3),
        ("Antibiotics", 1),
        ("Vitamins", 0),
    ]


@pytest.mark.asyncio
async def test_category_by_slug(db, catalog_ids) -> None:
    category = await catalog.get_category_by_slug(db, "antibiotics")
    assert category is not None
    assert category.id == catalog_ids["antibiotics"]
    assert category.count == 1

    empty = await catalog.get_category_by_slug(db, "vitamins")
    assert empty.count == 0


@pytest.mark.asyncio
async def test_category_slug_is_exact_and_case_sensitive(db, catalog_ids) -> None:
    assert await catalog.get_category_by_slug(db, "Antibiotics") is None
    assert await catalog.get_category_by_slug(db, "antibiotic") is None


@pytest.mark.asyncio
async def test_store_failure_becomes_store_unavailable() -> None:
    db = MagicMock(spec=AsyncSession)
    db.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("connection refused")))

    with pytest.raises(StoreUnavailable) as excinfo:
        await catalog.get_all_drugs(db)

    assert excinfo.value.detail == "Failed to fetch drugs"
    assert isinstance(excinfo.value.__cause__, OperationalError)
