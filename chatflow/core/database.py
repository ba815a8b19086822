from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from chatflow.core.config import settings

# check_same_thread=False is only needed for SQLite under FastAPI's threadpool
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}
)


def enable_sqlite_foreign_keys(target_engine) -> None:
    """Turn on FK enforcement (and cascades) for SQLite connections."""
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
