from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.sessions import router as sessions_router
from app.api.settlement import router as settlement_router
from app.config import get_settings
from app.storage.database import init_db

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("database ready, bank policy: %s", get_settings().bank_policy.value)
    yield


app = FastAPI(title="Poker Ledger API", lifespan=lifespan)
app.include_router(settlement_router)
app.include_router(sessions_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
