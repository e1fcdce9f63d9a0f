from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from ledger_staging.core.config import settings


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session per request and always close it"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create staging tables if they do not exist yet"""
    # Import models so they register on Base.metadata
    import ledger_staging.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def shutdown_db() -> None:
    """Release pooled connections"""
    engine.dispose()
