from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String

from inventoria.database.base import Base


class ItemRow(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    sku = Column(String, nullable=False, unique=True)
    description = Column(String)
    category_id = Column(Integer, ForeignKey("categories.id"))

    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(10, 2), nullable=False)
    location = Column(String)
    min_stock_level = Column(Integer, default=5)
    status = Column(String, nullable=False, default="active")

    rented_count = Column(Integer, nullable=False, default=0)
    broken_count = Column(Integer, nullable=False, default=0)

    rentable = Column(Boolean, nullable=False, default=True)
    expirable = Column(Boolean, nullable=False, default=False)
    expiration_date = Column(Date)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_items_category", "category_id"),
        {"sqlite_autoincrement": True},
    )


__all__ = ["ItemRow"]
