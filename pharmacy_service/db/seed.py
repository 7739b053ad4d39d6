# pharmacy_service/db/seed.py
import logging
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from pharmacy_service.db.models import Category, Drug

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = [
    {"name": "Obat Demam", "slug": "obat-demam", "description": "Obat untuk menurunkan demam", "icon": "🌡️"},
    {"name": "Obat Batuk", "slug": "obat-batuk", "description": "Obat untuk mengatasi batuk", "icon": "🫁"},
    {"name": "Obat Sakit Kepala", "slug": "obat-sakit-kepala", "description": "Obat untuk mengatasi sakit kepala", "icon": "🧠"},
    {"name": "Vitamin", "slug": "vitamin", "description": "Suplemen vitamin dan mineral", "icon": "💊"},
    {"name": "Obat Luar", "slug": "obat-luar", "description": "Obat untuk penggunaan luar", "icon": "🧴"},
    {"name": "Obat Lambung", "slug": "obat-lambung", "description": "Obat untuk masalah lambung", "icon": "🫄"},
]

DEMO_DRUGS = [
    {
        "name": "Paracetamol 500mg", "description": "Obat penurun demam dan pereda nyeri",
        "composition": "Paracetamol 500mg", "price": Decimal("15000"), "stock": 100, "category": "obat-demam",
        "manufacturer": "Kimia Farma", "dosage": "3x1 tablet per hari",
        "side_effects": ["Mual", "Muntah", "Ruam kulit"], "contraindications": ["Gangguan hati berat"],
    },
    {
        "name": "OBH Combi", "description": "Obat batuk berdahak dewasa",
        "composition": "Sukralfat 500mg", "price": Decimal("25000"), "stock": 50, "category": "obat-batuk",
        "manufacturer": "Dexa Medica", "dosage": "3x1 sendok teh per hari",
        "side_effects": ["Mengantuk", "Mual"], "contraindications": ["Anak dibawah 6 tahun"],
    },
    {
        "name": "Bodrex", "description": "Obat sakit kepala dan pusing",
        "composition": "Paracetamol 500mg, Kafein 50mg", "price": Decimal("12000"), "stock": 75, "category": "obat-sakit-kepala",
        "manufacturer": "Tempo Scan Pacific", "dosage": "2x1 tablet per hari",
        "side_effects": ["Jantung berdebar", "Sulit tidur"], "contraindications": ["Hipertensi", "Gangguan jantung"],
    },
    {
        "name": "Vitamin C 1000mg", "description": "Suplemen vitamin C untuk daya tahan tubuh",
        "composition": "Ascorbic Acid 1000mg", "price": Decimal("45000"), "stock": 200, "category": "vitamin",
        "manufacturer": "Blackmores", "dosage": "1x1 tablet per hari",
        "side_effects": ["Diare", "Mual"], "contraindications": ["Batu ginjal"],
    },
    {
        "name": "Betadine", "description": "Antiseptik untuk luka luar",
        "composition": "Povidone Iodine 10%", "price": Decimal("35000"), "stock": 30, "category": "obat-luar",
        "manufacturer": "Mundipharma", "dosage": "Oleskan pada luka 2-3x sehari",
        "side_effects": ["Iritasi kulit", "Reaksi alergi"], "contraindications": ["Hipersensitif iodine", "Gangguan tiroid"],
    },
    {
        "name": "Antasida Doen", "description": "Obat untuk mengatasi asam lambung",
        "composition": "Aluminium Hydroxide, Magnesium Hydroxide", "price": Decimal("18000"), "stock": 60, "category": "obat-lambung",
        "manufacturer": "Dankos Farma", "dosage": "2x1 tablet sesudah makan",
        "side_effects": ["Konstipasi", "Diare"], "contraindications": ["Gangguan ginjal berat"],
    },
    {
        "name": "Amoxicillin 500mg", "description": "Antibiotik untuk infeksi bakteri",
        "composition": "Amoxicillin 500mg", "price": Decimal("55000"), "stock": 25, "category": "obat-demam",
        "manufacturer": "Sanbe Farma", "dosage": "3x1 kapsul per hari",
        "side_effects": ["Diare", "Mual", "Ruam kulit"], "contraindications": ["Alergi penisilin"],
        "requires_prescription": True,
    },
    {
        "name": "Ibuprofen 400mg", "description": "Anti-inflamasi dan pereda nyeri",
        "composition": "Ibuprofen 400mg", "price": Decimal("22000"), "stock": 80, "category": "obat-sakit-kepala",
        "manufacturer": "Kalbe Farma", "dosage": "3x1 tablet per hari sesudah makan",
        "side_effects": ["Nyeri perut", "Mual", "Pusing"], "contraindications": ["Tukak lambung", "Gangguan ginjal"],
    },
]

PLACEHOLDER_IMAGE = "/api/placeholder/300/300"


async def seed_demo_catalog(db: AsyncSession) -> bool:
    """Insert the demo catalog into an empty store. Returns False if it was not empty."""
    existing = await db.scalar(select(func.count(Category.id)))
    if existing:
        logger.info("Catalog already has %d categories, skipping demo seed", existing)
        return False

    categories = {item["slug"]: Category(**item) for item in DEMO_CATEGORIES}
    db.add_all(categories.values())
    for item in DEMO_DRUGS:
        fields = {key: value for key, value in item.items() if key != "category"}
        fields.setdefault("requires_prescription", False)
        db.add(Drug(category=categories[item["category"]], image_url=PLACEHOLDER_IMAGE, **fields))
    await db.commit()
    logger.info("Seeded %d categories and %d drugs", len(DEMO_CATEGORIES), len(DEMO_DRUGS))
    return True
