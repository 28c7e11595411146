from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from postcraft.core.config import DATABASE_URL

SQLALCHEMY_DATABASE_URL = DATABASE_URL

if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # SQLite is single-file; the API serves requests from a threadpool
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=False,
    )
else:
    # Connection pooling for the server database
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        poolclass=QueuePool,
        pool_size=10,  # Connections kept open
        max_overflow=20,  # Extra connections under burst load
        pool_timeout=30,  # Seconds to wait for a free connection
        pool_pre_ping=True,  # Drop stale connections before use
        pool_recycle=3600,
        echo=False,
    )
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
