from fastapi import Depends
from psycopg import Connection

from threadboard.core.memory_store import InMemoryResponseStore
from threadboard.core.response_store import PostgresResponseStore, ResponseStore
from threadboard.db.fastapi import get_db

_memory_store = InMemoryResponseStore()


def get_response_store(conn: Connection = Depends(get_db)) -> ResponseStore:
    return PostgresResponseStore(conn)


def get_memory_store() -> ResponseStore:
    return _memory_store
