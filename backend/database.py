# backend/database.py
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings

logger = logging.getLogger(__name__)

MEMORY_DATABASE_URL = "sqlite://"


def _normalize_url(url: str) -> str:
    # SQLAlchemy only understands the postgresql:// scheme
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    if url == MEMORY_DATABASE_URL:
        # One shared connection, so every session sees the same in-memory database
        new_engine = create_engine(
            url, connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
    else:
        new_engine = create_engine(url, connect_args={"check_same_thread": False})

    # SQLite ignores ON DELETE clauses unless asked
    event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def _build_engine():
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not set. Using in-memory storage; data will not persist.")
        return make_engine(MEMORY_DATABASE_URL)

    url = _normalize_url(settings.DATABASE_URL)
    try:
        candidate = make_engine(url)
        with candidate.connect() as conn:
            conn.execute(text("select 1"))
        logger.info("Using database at %s", candidate.url.render_as_string(hide_password=True))
        return candidate
    except SQLAlchemyError as e:
        logger.error("Database unreachable, falling back to in-memory storage: %s", e)
        return make_engine(MEMORY_DATABASE_URL)


engine = _build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    # Models must be imported so their tables are registered on Base.metadata
    import models.users  # noqa: F401
    import models.session  # noqa: F401
    import models.product  # noqa: F401
    import models.cart  # noqa: F401
    import models.order  # noqa: F401
    import models.log  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
