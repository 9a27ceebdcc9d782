from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from cuore.core.config import settings


def build_engine(database_uri: str):
    if database_uri.startswith("sqlite"):
        # SQLite ignores pooling options; allow use across the request threadpool
        return create_engine(database_uri, connect_args={"check_same_thread": False})
    # PostgreSQL configuration with connection pooling
    return create_engine(
        database_uri,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=300,      # Recycle connections every 5 minutes
        pool_pre_ping=True,    # Validate connections before use
        pool_timeout=45,
        echo=False             # Set to True for SQL logging
    )


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
