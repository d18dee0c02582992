from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from inventoria.database.base import Base


class CategoryRow(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(String)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = {"sqlite_autoincrement": True}


__all__ = ["CategoryRow"]
