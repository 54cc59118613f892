# pharmacart/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pharmacart.api import create_app
from pharmacart.data.database import Base, engine
from pharmacart.data import models  # noqa: F401  registers every table on Base.metadata
from pharmacart.data.seed import seed
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Creating tables: {sorted(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    seed()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = create_app(lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
