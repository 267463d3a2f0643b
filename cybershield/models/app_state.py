"""AppState model: one JSON snapshot per persisted key (progress, settings, ...)."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from cybershield.db.session import Base


class AppState(Base):
    __tablename__ = "app_state"

    key = Column(String(128), primary_key=True)
    # JSON document; SQLite has no native JSON so we keep Text
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
