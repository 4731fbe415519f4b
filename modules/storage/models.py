"""
Storage Module - Models
========================
StorageEntry: local key-value store backing the basket and last order.
"""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from config.database import Base


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)                  # serialized JSON
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<StorageEntry {self.key} ({len(self.value or '')} chars)>"
