import psycopg
from psycopg.rows import dict_row
from threadboard.config.settings import DB_CONNECT_TIMEOUT, POSTGRES_CONN_STRING


def get_app_db() -> psycopg.Connection:
    return psycopg.connect(
        POSTGRES_CONN_STRING,
        row_factory=dict_row,
        connect_timeout=DB_CONNECT_TIMEOUT,
    )
