"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookshelf.api import auth, books
from bookshelf.config import get_settings
from bookshelf.database import init_db
from bookshelf.exceptions import add_exception_handlers

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    if settings.create_tables_on_startup:
        logger.info("Creating database tables")
        init_db()
    yield


app = FastAPI(
    title="Bookshelf Catalog API",
    description="Personal library catalog with token-based authentication",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

add_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(books.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
