# pharmacy_service/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import jwt
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacy_service.config import Settings
from pharmacy_service.db import cart, catalog, users
from pharmacy_service.db.database import create_engine, create_session_factory, get_db
from pharmacy_service.db.init_db import init_db
from pharmacy_service.db.schemas import APIResponse, CartAdd, CartUpdate, DrugsResponse
from pharmacy_service.db.seed import seed_demo_catalog
from pharmacy_service.exceptions import PharmacyError, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

API_V1 = "/api/v1"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def verify_token(token: str, settings: Settings) -> int:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise HTTPException(status_code=401, detail="Invalid token")
    return user_id


async def current_user_id(request: Request, token: str = Depends(oauth2_scheme)) -> int:
    return verify_token(token, request.app.state.settings)


def ok(data=None, message: Optional[str] = None) -> dict:
    return APIResponse(success=True, data=data, message=message).model_dump(mode="json", by_alias=True, exclude_none=True)


def fail(message: str, status_code: int) -> JSONResponse:
    body = APIResponse(success=False, error=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def parse_category_id(raw: str) -> int:
    """Query-string category id; "0" and negatives reach the positive-id check."""
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("category id must be a positive integer") from None


def dump(items):
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        await init_db(engine)
        if settings.seed_demo_data:
            async with app.state.session_factory() as session:
                await seed_demo_catalog(session)
        logger.info("PharmaCare API ready")
        yield
        await engine.dispose()

    app = FastAPI(title="PharmaCare API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    def error_response(request: Request, exc: PharmacyError) -> JSONResponse:
        # /api/v1 keeps its {success, error} envelope, the storefront route a bare {error}
        if request.url.path.startswith(API_V1):
            return fail(exc.detail, exc.status_code)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return error_response(request, exc)

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error("%s %s failed: %r", request.method, request.url.path, exc.__cause__)
        return error_response(request, exc)

    # Storefront route: {drugs: [...]} or {error: ...}
    @app.get("/api/drugs", response_model=DrugsResponse)
    async def read_drugs(
        search: str = Query(default=""),
        category: Optional[str] = Query(default=None),
        db: AsyncSession = Depends(get_db),
    ):
        try:
            if search:
                drugs = await catalog.search_drugs(db, search)
            elif category:
                drugs = await catalog.get_drugs_by_category(db, parse_category_id(category))
            else:
                drugs = await catalog.get_all_drugs(db)
        except StoreUnavailable:
            logger.exception("Error fetching drugs")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch drugs"})
        return {"drugs": dump(drugs)}

    @app.get("/api/v1/health")
    async def health_check():
        return {"status": "ok", "service": "pharmacare-backend"}

    @app.get("/api/v1/drugs")
    async def list_drugs(db: AsyncSession = Depends(get_db)):
        return ok(dump(await catalog.get_all_drugs(db)))

    # declared before /drugs/{drug_id} so "search" is not parsed as an id
    @app.get("/api/v1/drugs/search")
    async def search(q: str = "", db: AsyncSession = Depends(get_db)):
        return ok(dump(await catalog.search_drugs(db, q)))

    @app.get("/api/v1/drugs/{drug_id}")
    async def read_drug(drug_id: int, db: AsyncSession = Depends(get_db)):
        drug = await catalog.get_drug_by_id(db, drug_id)
        if drug is None:
            return fail("Drug not found", 404)
        return ok(drug.model_dump(mode="json", by_alias=True))

    @app.get("/api/v1/categories")
    async def list_categories(db: AsyncSession = Depends(get_db)):
        return ok(dump(await catalog.get_all_categories(db)))

    @app.get("/api/v1/categories/{slug}")
    async def read_category(slug: str, db: AsyncSession = Depends(get_db)):
        category = await catalog.get_category_by_slug(db, slug)
        if category is None:
            return fail("Category not found", 404)
        return ok(category.model_dump(mode="json", by_alias=True))

    @app.get("/api/v1/categories/{category_id}/drugs")
    async def category_drugs(category_id: int, db: AsyncSession = Depends(get_db)):
        return ok(dump(await catalog.get_drugs_by_category(db, category_id)))

    @app.get("/api/v1/users/me")
    async def read_current_user(user_id: int = Depends(current_user_id), db: AsyncSession = Depends(get_db)):
        user = await users.get_user_by_id(db, user_id)
        if user is None:
            return fail("User not found", 404)
        return ok(user.model_dump(mode="json", by_alias=True))

    @app.get("/api/v1/cart")
    async def read_cart(user_id: int = Depends(current_user_id), db: AsyncSession = Depends(get_db)):
        return ok(dump(await cart.get_cart_items(db, user_id)))

    @app.post("/api/v1/cart")
    async def add_to_cart(item: CartAdd, user_id: int = Depends(current_user_id), db: AsyncSession = Depends(get_db)):
        await cart.add_to_cart(db, user_id, item.drug_id, item.quantity)
        return ok(dump(await cart.get_cart_items(db, user_id)), message="Drug added to cart")

    @app.put("/api/v1/cart/{drug_id}")
    async def update_cart_item(
        drug_id: int,
        item: CartUpdate,
        user_id: int = Depends(current_user_id),
        db: AsyncSession = Depends(get_db),
    ):
        await cart.update_cart_item(db, user_id, drug_id, item.quantity)
        return ok(dump(await cart.get_cart_items(db, user_id)), message="Cart updated")

    @app.delete("/api/v1/cart")
    async def clear_cart(user_id: int = Depends(current_user_id), db: AsyncSession = Depends(get_db)):
        await cart.clear_cart(db, user_id)
        return ok([], message="Cart cleared")

    return app
