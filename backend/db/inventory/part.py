from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, unique=True)


class Footprint(Base):
    __tablename__ = "footprints"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, unique=True)


class Part(Base):
    __tablename__ = "parts"

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    footprint_id = Column(Integer, ForeignKey("footprints.id"), nullable=True, index=True)

    mpn = Column(Text, nullable=True, unique=True)

    # Base unit implied by the category (F, Ω, H or none)
    value = Column(Float, nullable=True)
    volt_rating = Column(Float, nullable=True)
    watt_rating = Column(Float, nullable=True)
    amp_rating = Column(Float, nullable=True)
    percent_tol = Column(Float, nullable=True)
    stats = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    category = relationship("Category")
    footprint = relationship("Footprint")
    stocks = relationship("Stock", back_populates="part", cascade="all, delete-orphan")
