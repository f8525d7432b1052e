import logging
from typing import Optional

from fastapi import FastAPI

from ..config import settings
from ..database import Database
from .endpoints import router

logger = logging.getLogger("artshelf.api")


def create_app(db: Optional[Database] = None) -> FastAPI:
    """
    Build the gallery API.

    Args:
        db: Database to serve from. Defaults to one built from settings.
    """
    if db is None:
        db = Database(settings.get_database_url(), echo=settings.sql_echo)

    app = FastAPI(title="Art Shelf", description="Personal artwork gallery API")
    app.state.db = db
    app.include_router(router, prefix=settings.api_prefix)

    logger.progress(f"API ready at {settings.api_prefix} on {db.url}")
    return app
