import os
from contextlib import asynccontextmanager

import asyncpg
import uvicorn
from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from aggregation import router as aggregation_router
from core import db, errors
from core.logging import configure_logging
from ingestion import router as ingestion_router

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the dashboard dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.register_exception_handlers(app)

app.include_router(ingestion_router.router, tags=["ingestion"])
app.include_router(aggregation_router.router, tags=["aggregation"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/health/ready")
async def health_ready(pool: asyncpg.Pool = Depends(db.get_pool)):
    try:
        ready = await db.ping(pool)
    except Exception:
        ready = False
    if not ready:
        return errors.error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Database unavailable")
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "detection-service api"}


def run() -> None:
    uvicorn.run(
        "main:app",
        host=os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=db._env_int("PORT", 8000),
    )


if __name__ == "__main__":
    run()
