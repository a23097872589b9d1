from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from camp_scheduling.core.config import settings


def build_engine(url: str):
    """
    Create an engine for the given URL.

    SQLite needs cross-thread connections for FastAPI's threadpool, a generous
    lock timeout so concurrent writers queue instead of failing, and foreign
    keys switched on per connection.
    """
    if make_url(url).get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    engine = create_engine(
        url, connect_args={"check_same_thread": False, "timeout": 30}
    )

    @event.listens_for(engine, "connect")
    def enable_sqlite_fk(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


# The engine is the entry point to the database. It's configured with the
# database URL and handles the connection pooling.
engine = build_engine(settings.DATABASE_URL)

# SessionLocal is a factory for creating new Session objects, one per request.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Runs after the endpoint has finished, even if there was an error.
        db.close()
