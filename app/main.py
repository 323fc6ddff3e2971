import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
import alembic.config
import alembic.command

from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_sessionmaker
from app.api.router import api_router

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def run_migrations(database_url: str):
    """Sync function to run migrations"""
    alembic_cfg = alembic.config.Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    # Keep the logging set up by create_app
    alembic_cfg.attributes["configure_logger"] = False
    alembic.command.upgrade(alembic_cfg, "head")


# Close the engine once everything is done and close all the sessions
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Apply any pending migrations automatically when the app starts
    if settings.RUN_MIGRATIONS:
        try:
            await asyncio.to_thread(run_migrations, settings.DATABASE_URL)
            logger.info("Migrations applied successfully (or already up-to-date)")
        except Exception as e:
            logger.error(f"Migration error during startup: {e}")

    yield
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around one explicit settings object.
    Missing DATABASE_URL / SECRET_KEY fails here, before anything is served.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=logging.INFO)

    app = FastAPI(title="Hotel Accessibility Checker API", lifespan=lifespan)

    # One engine per app, handed to routes through get_db
    app.state.settings = settings
    app.state.engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)

    # Include the master router containing all our endpoints
    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {"message": "Welcome to the Hotel Accessibility Checker API"}

    return app


app = create_app()
