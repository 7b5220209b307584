import logging

import psycopg
from fastapi import HTTPException

from threadboard.db.postgres import get_app_db

logger = logging.getLogger(__name__)


def get_db():
    try:
        conn = get_app_db()
    except psycopg.OperationalError as e:
        logger.error("Database connection not available: %s", e)
        raise HTTPException(status_code=503, detail="Database connection not available")
    try:
        yield conn
    finally:
        conn.close()
