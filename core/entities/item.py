# =============================================================================
# core/entities/item.py - Item Entity
# =============================================================================
# The `items` table. IDs are 16-character alphanumerics generated in Python;
# timestamps are stored in UTC.
# =============================================================================

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lib.database import Base
from lib.utils import ID_LENGTH, generate_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemEntity(Base):
    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"ItemEntity(id={self.id!r}, name={self.name!r}, price={self.price!r})"
