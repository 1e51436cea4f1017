import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from app.config import settings

logger = logging.getLogger("string_analyzer.db")


def _engine_kwargs(url: str) -> dict:
    # SQLite connections are shared across the request threadpool
    if make_url(url).drivername.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {}


try:
    engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
except ModuleNotFoundError as e:
    logger.warning(
        "Failed to load DB driver for %s: %s. Falling back to sqlite:///./strings.db",
        settings.DATABASE_URL,
        e,
    )
    engine = create_engine("sqlite:///./strings.db", **_engine_kwargs("sqlite://"))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    """Create the schema on the configured engine."""
    from app import models  # noqa: F401  (registers tables on Base)

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
