"""
Postcraft API
One prompt in, six marketing formats out.
"""
from dotenv import load_dotenv
load_dotenv()

import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,
)

logger = logging.getLogger(__name__)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from postcraft.api.errors import register_error_handlers
from postcraft.api.routes import auth, generate, history, payment
from postcraft.core.config import DATABASE_URL, FRONTEND_ORIGINS, STORE_BACKEND


def run_migrations() -> None:
    """Run Alembic migrations on startup. Fails startup if they fail."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_ini = project_root / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found, skipping Alembic migrations")
        return
    try:
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.attributes["configure_logger"] = False
        alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
        command.upgrade(alembic_cfg, "head")
        logger.info("Alembic migrations completed successfully")
    except Exception as e:
        logger.exception("Alembic migration failed: %s", e)
        raise


app = FastAPI(title="Postcraft")
register_error_handlers(app)


@app.on_event("startup")
def startup_event():
    """Bring the SQL schema up to date when the SQL store is active."""
    if STORE_BACKEND != "sql":
        logger.info("Store backend is %r; skipping database setup", STORE_BACKEND)
        return

    from postcraft.db.base import Base
    from postcraft.db.session import engine
    import postcraft.models  # noqa: F401  register models with Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    run_migrations()


app.add_middleware(
    CORSMiddleware,
    allow_origins=FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(generate.router, prefix="/api/generate", tags=["Generate"])
app.include_router(history.router, prefix="/api/history", tags=["History"])
app.include_router(payment.router, prefix="/api/payment", tags=["Payment"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
