# cheese_shop/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.storage import CatalogFile
from .catalog.store import CatalogStore
from .config import Settings, get_settings
from .logconfig import configure_logging


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(level=settings.log_level, json_logs=settings.json_logs)
        store = CatalogStore(CatalogFile(settings.data_file))
        # A failure to save the default cheeses aborts startup.
        state = store.init()
        logger.info(
            "Catalog ready (%s, %d cheeses, data file %s)",
            state.value,
            len(store.list()),
            settings.data_file,
        )
        app.state.store = store
        yield

    app = FastAPI(
        title="Cheese Shop API",
        description=(
            "Cheese catalogue: list, lookup by id, create, update and "
            "delete, persisted to a single JSON file."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # 🔹 Basic route for a quick liveness check
    @app.get("/")
    def health_check():
        return {"status": "ok", "cheeses": len(app.state.store.list())}

    app.include_router(catalog_router)
    return app


app = create_app()
