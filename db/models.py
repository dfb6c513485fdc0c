"""
db.models - SQLAlchemy ORM declarations.

Tables
------
car_models       - one row per vehicle model/trim.  Names are unique.
car_parts        - one row per replacement part, unique by part number.
car_part_models  - many-to-many compatibility links.  is_primary marks
                   the model a part was designed for; at most one per
                   part (enforced by the writers, not the schema).
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean, Column, ForeignKey, Index, Integer, String,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class CarModel(Base):
    __tablename__ = "car_models"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, unique=True)

    __table_args__ = (
        Index("ix_car_models_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<CarModel {self.id} {self.name!r}>"


class CarPart(Base):
    __tablename__ = "car_parts"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    part_number = Column(String(100), nullable=False, unique=True)
    name        = Column(String(200), nullable=False, default="")

    __table_args__ = (
        Index("ix_car_parts_part_number", "part_number"),
    )

    @property
    def label(self) -> str:
        """Display title used by list and detail views: ``Name (PN)``."""
        return f"{self.name} ({self.part_number})"

    def __repr__(self) -> str:
        return f"<CarPart {self.id} {self.part_number!r}>"


class CarPartLink(Base):
    __tablename__ = "car_part_models"

    # Composite key gives the (model, part) uniqueness
    model_id   = Column("car_id", Integer, ForeignKey("car_models.id"), primary_key=True)
    part_id    = Column(Integer, ForeignKey("car_parts.id"), primary_key=True)
    is_primary = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_car_part_models_part_id", "part_id"),
    )
