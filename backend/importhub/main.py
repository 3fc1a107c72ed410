"""
# `importhub/main.py` — Application entry point

## Overview
`create_app()` builds the FastAPI application: CORS, error handlers, routers and the
database lifecycle. The module-level `app` is what uvicorn serves.

---

## Routers
- `/api/imports` — import orders and the dashboard
- `/api/suppliers`, `/api/products` — read-only directory lookups
- `/health` — liveness probe

---

## Database lifecycle
- `startup`: the engine (connection pool) is created and, unless `CREATE_TABLES=false`,
  missing tables are created.
- `shutdown`: the engine is disposed.
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from importhub.config import Settings, settings
from importhub.core.errors import register_exception_handlers
from importhub.core.logging_config import configure_logging
from importhub.database import Database
from importhub.routers import directory, health, imports

logger = logging.getLogger("importhub.main")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings)

    app = FastAPI(
        title="Imports Service",
        description="Import orders: creation, shipping status and dashboard aggregates.",
        version="1.0.0",
        redirect_slashes=False,
        debug=app_settings.debug,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings.database_url, echo=app_settings.database_echo)

    # Configure CORS (allow front-end domain or all origins as specified)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(imports.router)
    app.include_router(directory.router)

    @app.on_event("startup")
    async def _startup_database():
        database: Database = app.state.database
        database.connect()
        if app_settings.create_tables:
            await database.create_all()
        logger.info("Imports service started")

    @app.on_event("shutdown")
    async def _shutdown_database():
        await app.state.database.dispose()

    return app


app = create_app()

# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("importhub.main:app", host="0.0.0.0", port=settings.imports_service_port, reload=settings.debug)
