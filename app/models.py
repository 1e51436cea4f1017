from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import JSON, DateTime, Integer, String, Text, func
from app.database import Base
from sqlalchemy.orm import Mapped, mapped_column


class AnalyzedString(Base):
    """A stored string with its analyzed properties, unique by value and by hash."""
    __tablename__ = "strings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    sha256_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    properties: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now()
    )
