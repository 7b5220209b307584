import os
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from dotenv import load_dotenv

load_dotenv()

DB_CONFIG = {
    "host": os.getenv("DB_HOST"),
    "port": os.getenv("DB_PORT"),
    "dbname": os.getenv("DB_NAME"),
    "user": os.getenv("DB_USER"),
    "password": os.getenv("DB_PASSWORD"),
    "sslmode": os.getenv("DB_SSLMODE", "disable"),
}

INIT_SQL = """
CREATE TABLE IF NOT EXISTS threads (
    thread_id BIGSERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    bumped_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_threads_bumped_at
ON threads (bumped_at DESC);

CREATE TABLE IF NOT EXISTS responses (
    thread_id BIGINT NOT NULL REFERENCES threads(thread_id) ON DELETE CASCADE,
    response_number BIGINT NOT NULL CHECK (response_number >= 1),
    author_name TEXT NOT NULL DEFAULT '',
    mail TEXT NOT NULL DEFAULT '',
    posted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    hash_id TEXT NOT NULL,
    content TEXT NOT NULL,

    PRIMARY KEY (thread_id, response_number)
);

-- Responses are written once and never edited
CREATE OR REPLACE FUNCTION forbid_response_update()
RETURNS trigger AS $$
BEGIN
    RAISE EXCEPTION 'Responses are immutable';
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS no_response_update ON responses;
CREATE TRIGGER no_response_update
BEFORE UPDATE ON responses
FOR EACH ROW EXECUTE FUNCTION forbid_response_update();
"""

def init_db():
    conn = psycopg2.connect(**DB_CONFIG)
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)

    try:
        with conn.cursor() as cur:
            cur.execute(INIT_SQL)
            print("board schema initialized / updated successfully")
    finally:
        conn.close()

if __name__ == "__main__":
    init_db()
