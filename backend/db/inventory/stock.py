from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)


class Stock(Base):
    __tablename__ = "stock"
    __table_args__ = (
        UniqueConstraint("part_id", "location_id", name="ux_stock_part_location"),
        CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
        CheckConstraint("staged >= 0", name="ck_stock_staged_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    part_id = Column(Integer, ForeignKey("parts.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=True, index=True)

    quantity = Column(Integer, nullable=True, default=0)
    # Provisionally reserved against quantity; NULL means nothing staged
    staged = Column(Integer, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    part = relationship("Part", back_populates="stocks")
    location = relationship("Location")
