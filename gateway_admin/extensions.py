"""Flask extensions and database setup."""
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import create_engine
from gateway_admin.config import DATABASE_CONFIG

# SQLAlchemy instance
db = SQLAlchemy()


def create_db_engine(db_url: str = None):
    """
    Create database engine with appropriate settings.

    SQLite doesn't support pool_size, max_overflow, etc.
    """
    db_url = db_url or DATABASE_CONFIG["url"]

    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)

    return create_engine(
        db_url,
        isolation_level=DATABASE_CONFIG["isolation_level"],
        pool_size=DATABASE_CONFIG["pool_size"],
        max_overflow=DATABASE_CONFIG["max_overflow"],
        pool_pre_ping=DATABASE_CONFIG["pool_pre_ping"],
        pool_recycle=DATABASE_CONFIG["pool_recycle"],
        pool_timeout=DATABASE_CONFIG["pool_timeout"],
        echo=False,
    )
