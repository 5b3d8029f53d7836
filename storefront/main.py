# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from storefront.api import deps
from storefront.api.routers import admin, carts, health, orders, products, users
from storefront.data.database import SessionLocal, init_db
from storefront.data.seed import seed_admin, seed_catalog
from storefront.repos.storage import SqlStorage
from storefront.utils.settings import SEED_ADMIN_USERNAME, SEED_CATALOG, STORAGE_BACKEND
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _bootstrap() -> None:
    if STORAGE_BACKEND == "sql":
        logger.info("Initializing database tables")
        init_db()
        db = SessionLocal()
        try:
            _seed(SqlStorage(db))
        finally:
            db.close()
    else:
        logger.info("Using in-memory storage (state is lost on restart)")
        _seed(deps._memory_storage)


def _seed(storage) -> None:
    if SEED_CATALOG:
        seed_catalog(storage)
    if SEED_ADMIN_USERNAME:
        seed_admin(storage, SEED_ADMIN_USERNAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _bootstrap()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(admin.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
