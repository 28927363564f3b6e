"""weblog FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

import config
from api.routes import router
from config import API_HOST, API_PORT
from content.store import create_sample
from db.database import dispose_engine, init_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize DB on startup, release it on shutdown."""
    init_db()
    if config.CREATE_SAMPLE:
        create_sample()
    yield
    dispose_engine()


app = FastAPI(
    title="weblog",
    description="Single-author posts, reposts and hearts with cached link previews",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)

if __name__ == "__main__":
    uvicorn.run("main:app", host=API_HOST, port=API_PORT, reload=True)
