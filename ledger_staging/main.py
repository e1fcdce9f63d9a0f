from contextlib import asynccontextmanager

from fastapi import FastAPI

from ledger_staging.core.config import settings
from ledger_staging.core.database import init_db, shutdown_db
from ledger_staging.core.logging import setup_logging, get_logger
from ledger_staging.api.rest import api_router
from ledger_staging.api.graphql.router import graphql_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_format)
    init_db()
    logger.info("Staging database initialized", extra={"ingestion_mode": settings.ingestion_mode})
    yield
    shutdown_db()


app = FastAPI(
    title="Ledger Staging API",
    description="Stage uploaded bank transactions and sync them to the accounting system",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")
app.include_router(graphql_router, prefix="/graphql")


@app.get("/")
def root():
    return {"message": "Ledger Staging API", "version": "1.0.0"}


@app.get("/health")
def health():
    return {"status": "healthy"}
