# artmarket/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from artmarket.core.config import get_settings
from artmarket.database import build_engine, create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from artmarket.models import user as _user_models  # noqa: F401
from artmarket.models import seller as _seller_models  # noqa: F401
from artmarket.models import product as _product_models  # noqa: F401
from artmarket.models import cart as _cart_models  # noqa: F401
from artmarket.models import order as _order_models  # noqa: F401


# Routers
from artmarket.routers.auth import router as auth_router
from artmarket.routers.users import router as users_router
from artmarket.routers.sellers import router as sellers_router
from artmarket.routers.categories import router as categories_router
from artmarket.routers.products import router as products_router
from artmarket.routers.cart import router as cart_router
from artmarket.routers.product_orders import router as product_orders_router
from artmarket.routers.custom_orders import router as custom_orders_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Build the engine, verify DB connectivity and create tables.

    Shutdown:
      - Dispose the engine's connection pool.
    """
    logger.info("Startup: connecting to database...")
    engine = build_engine(settings.DATABASE_URL)
    try:
        create_db_and_tables(engine)
        logger.info("Startup: DB connection OK, tables verified.")
    except SQLAlchemyError as e:
        logger.error("Startup: DB connection FAILED: %s", e)
        engine.dispose()
        raise

    app.state.engine = engine
    yield
    engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with the field errors attached."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Versioned API prefix, e.g. /api
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(sellers_router, prefix=settings.API_V1_STR)
app.include_router(categories_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(product_orders_router, prefix=settings.API_V1_STR)
app.include_router(custom_orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "artmarket-backend"}
