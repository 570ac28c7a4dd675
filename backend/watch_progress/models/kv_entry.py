from __future__ import annotations
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from watch_progress.db.session import Base


class KeyValueEntry(Base):
    __tablename__ = 'kv_entries'
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    # serialized payload, opaque to the storage layer
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
