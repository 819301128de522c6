"""StorageItem model: one key of the persisted key-value namespace."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from app.db.session import Base

# Values are JSON strings; SQLite has no native JSON


class StorageItem(Base):
    __tablename__ = "storage_items"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)
