"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.storage_item import StorageItem  # noqa: F401

__all__ = ["Base", "StorageItem"]
