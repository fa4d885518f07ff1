from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .routers import materials, projects, assets, calculator

logger = logging.getLogger("printquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Databases created by Base.metadata.create_all() before the first migration
    have no alembic_version table; those are stamped at the initial revision
    first so the upgrade doesn't try to recreate existing tables.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

        insp = inspect(engine)
        has_alembic = "alembic_version" in insp.get_table_names()
        has_projects = "projects" in insp.get_table_names()

        if not has_alembic and has_projects:
            logger.info("Stamping initial migration 5c0f1e9a7b21 (tables already exist)")
            command.stamp(alembic_cfg, "5c0f1e9a7b21")

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning("Alembic migration warning: %s", e)


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Cost and pricing backend for 3D-printing shops",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(materials.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(assets.router, prefix="/api")
app.include_router(calculator.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "printquote"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


@app.on_event("startup")
def auto_seed():
    """Seed the default material catalog on first run."""
    from .database import SessionLocal
    db = SessionLocal()
    try:
        seeded = materials.seed_default_materials(db)
        if seeded:
            logger.info("Seeded %d default materials", seeded)
    finally:
        db.close()
