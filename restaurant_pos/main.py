import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from restaurant_pos.api.v1.router import api_router_v1
from restaurant_pos.core.config import settings
from restaurant_pos.core.logging import setup_logging
from restaurant_pos.database import SessionLocal, engine
from restaurant_pos.db import base  # noqa: F401  registers every model on Base.metadata
from restaurant_pos.db.base_class import Base
from restaurant_pos.initial_data import init_db
from restaurant_pos.services.menu_catalog import MenuCatalog
from restaurant_pos.services.notifications import OrderEventBus
from restaurant_pos.services.redis_service import RedisEventPublisher

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Restaurant point of sale: tables, orders, kitchen queue and billing",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.state.event_bus = OrderEventBus()
app.state.menu_catalog = MenuCatalog.from_file(settings.MENU_FILE)
app.state.redis_publisher = None


@app.on_event("startup")
def on_startup():
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} ({settings.ENVIRONMENT})")
    logger.info(f"Menu catalog loaded with {len(app.state.menu_catalog)} item(s)")

    # In production the schema comes from Alembic migrations
    if settings.ENVIRONMENT == "development":
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            init_db(db)
        finally:
            db.close()
        logger.info("Tables created and seeded (development only)")

    if settings.REDIS_ENABLED:
        publisher = RedisEventPublisher()
        publisher.attach(app.state.event_bus)
        app.state.redis_publisher = publisher


@app.on_event("shutdown")
def on_shutdown():
    publisher = app.state.redis_publisher
    if publisher is not None:
        publisher.detach(app.state.event_bus)
        app.state.redis_publisher = None


app.include_router(api_router_v1, prefix=settings.API_V1_STR)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred"},
    )


@app.get("/", tags=["Root"])
async def read_root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}",
        "docs": "/docs",
        "status": "operational",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health", tags=["Health Check"])
async def health_check():
    """Liveness probe."""
    return {
        "status": "healthy",
        "database": "configured" if settings.DATABASE_URL else "missing",
        "environment": settings.ENVIRONMENT,
    }
