# routers/health.py
import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import inspect, text

from alembic.config import Config
from alembic.script import ScriptDirectory
from db import Base, engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/db")
def health_db():
    """Reachable database with both the results and attempt-event tables in place."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            present = set(inspect(conn).get_table_names())
    except Exception as e:
        logger.exception("database health check failed")
        raise HTTPException(status_code=500, detail=f"db_error: {type(e).__name__}")

    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        logger.warning("database is missing tables: %s", ", ".join(missing))
    return {"ok": not missing, "missing_tables": missing}


@router.get("/migrations")
def health_migrations():
    # alembic_version is only there once `alembic upgrade` has run
    try:
        heads = list(ScriptDirectory.from_config(Config("alembic.ini")).get_heads())
    except Exception:
        logger.warning("could not read alembic heads", exc_info=True)
        heads = []

    try:
        with engine.connect() as conn:
            stamped = "alembic_version" in inspect(conn).get_table_names()
            db_ver = (
                conn.execute(text("SELECT version_num FROM alembic_version")).scalar_one_or_none()
                if stamped
                else None
            )
    except Exception as e:
        logger.exception("migration health check failed")
        return {"ok": False, "error": type(e).__name__, "code_heads": heads, "db_version": None}

    synced = bool(heads) and db_ver in heads
    return {"ok": synced, "synced": synced, "db_version": db_ver, "code_heads": heads}
