from contextlib import asynccontextmanager

from fastapi import FastAPI

from threadboard.api.commands import router as command_router
from threadboard.api.dependencies import get_memory_store, get_response_store
from threadboard.api.reads import router as read_router
from threadboard.config.log import configure_logging
from threadboard.config.settings import BOARD_NAME, LOG_LEVEL, STORE_BACKEND


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    yield


app = FastAPI(title=BOARD_NAME, lifespan=lifespan)

# Write side
app.include_router(command_router)

# Read side
app.include_router(read_router)

if STORE_BACKEND == "memory":
    app.dependency_overrides[get_response_store] = get_memory_store


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
