from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .config import settings

DATABASE_URL = settings.resolved_database_url
IS_SQLITE = DATABASE_URL.startswith("sqlite")

# check_same_thread=False lets FastAPI's threadpool share SQLite connections
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
)


def enable_sqlite_fk(dbapi_connection, _):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if IS_SQLITE:
    event.listen(engine, "connect", enable_sqlite_fk)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db(bind=None) -> None:
    """Create all tables (SQLite/dev setups without migrations)."""
    from .models.generated import Base

    if bind is None:
        bind = engine
        if IS_SQLITE and DATABASE_URL.startswith("sqlite:///"):
            from pathlib import Path

            Path(DATABASE_URL.replace("sqlite:///", "", 1)).parent.mkdir(
                parents=True, exist_ok=True
            )
    Base.metadata.create_all(bind=bind)


# FastAPI dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
