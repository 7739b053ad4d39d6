# pharmacy_service/db/schemas.py

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Схема для лекарства (Drug)
class Drug(CamelModel):
    id: int
    name: str
    description: Optional[str] = ""
    composition: Optional[str] = ""
    price: float
    stock: int
    category_id: Optional[int] = None
    category: str = ""  # joined category name
    manufacturer: Optional[str] = ""
    dosage: Optional[str] = ""
    side_effects: List[str] = Field(default_factory=list)
    contraindications: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    requires_prescription: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Схема для категории (Category)
class Category(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = ""
    icon: Optional[str] = ""
    count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Схема для пользователя (User)
class User(CamelModel):
    id: int
    email: str
    name: str
    phone: Optional[str] = None
    address: Optional[Dict[str, Any]] = None
    is_verified: bool = False
    created_at: Optional[datetime] = None


class UserWithPassword(User):
    password_hash: str


class CartLine(CamelModel):
    drug: Drug
    quantity: int


class CartAdd(CamelModel):
    drug_id: int
    quantity: int = 1


class CartUpdate(CamelModel):
    quantity: int


class DrugsResponse(CamelModel):
    drugs: List[Drug]


class ErrorResponse(BaseModel):
    error: str


class APIResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
