# pharmacy_service/db/users.py
"""
User records. Passwords arrive already hashed; hashing and token issuance
happen outside this service.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from pharmacy_service.db.models import User
from pharmacy_service.db.schemas import User as UserSchema, UserWithPassword
from pharmacy_service.exceptions import StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)


async def _fetch_user(db: AsyncSession, statement) -> Optional[User]:
    try:
        result = await db.execute(statement)
    except SQLAlchemyError as exc:
        logger.error("Query for user failed: %s", exc)
        raise StoreUnavailable("Failed to fetch user") from exc
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, password_hash: str, name: str, phone: Optional[str] = None) -> UserSchema:
    if not email or not password_hash or not name:
        raise ValidationError("email, password hash and name are required")
    db_user = User(email=email, password_hash=password_hash, name=name, phone=phone)
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ValidationError("email is already registered") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Creating user %s failed: %s", email, exc)
        raise StoreUnavailable("Failed to create user") from exc
    await db.refresh(db_user)
    logger.info("Created user %s", db_user.id)
    return UserSchema.model_validate(db_user)


# Пользователь вместе с хэшем пароля, для проверки при входе
async def get_user_by_email(db: AsyncSession, email: str) -> Optional[UserWithPassword]:
    db_user = await _fetch_user(db, select(User).filter(User.email == email))
    return UserWithPassword.model_validate(db_user) if db_user else None


async def get_user_by_id(db: AsyncSession, user_id) -> Optional[UserSchema]:
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        return None
    db_user = await _fetch_user(db, select(User).filter(User.id == user_id))
    return UserSchema.model_validate(db_user) if db_user else None
