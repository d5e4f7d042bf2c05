"""
Database Configuration
Engine, session factory and declarative base
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from ideaflow.config.settings import settings


def _build_engine(database_url: str):
    """Create the SQLAlchemy engine for the configured database"""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False, "timeout": 30},
        )

        # SQLite ignores SELECT ... FOR UPDATE, so every transaction takes
        # the database write lock up front instead.
        @event.listens_for(engine, "connect")
        def _disable_pysqlite_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_engine(
        database_url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        pool_pre_ping=True,
    )


engine = _build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Database session dependency"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Import every model so the mappers resolve, then create missing tables"""
    from ideaflow.models import tenant, user, category, idea, approval_workflow, approval  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
