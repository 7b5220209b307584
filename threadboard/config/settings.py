import os
from dotenv import load_dotenv

load_dotenv()

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_SSLMODE = os.getenv("DB_SSLMODE", "disable")
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))

POSTGRES_CONN_STRING = (
    f"postgresql://{DB_USER}:{DB_PASSWORD}@"
    f"{DB_HOST}:{DB_PORT}/{DB_NAME}"
    f"?sslmode={DB_SSLMODE}"
)

# "postgres" or "memory"
STORE_BACKEND = os.getenv("STORE_BACKEND", "postgres")

BOARD_NAME = os.getenv("BOARD_NAME", "threadboard")
DEFAULT_AUTHOR_NAME = os.getenv("DEFAULT_AUTHOR_NAME", "名無しさん")
HASH_ID_SALT = os.getenv("HASH_ID_SALT", "")

MAX_TITLE_LENGTH = int(os.getenv("MAX_TITLE_LENGTH", "100"))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", "2000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
