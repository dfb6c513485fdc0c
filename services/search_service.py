"""
services.search_service - Substring search and link listings.

Each search kind maps to one fixed, parameterized statement.  The user's
term is only ever bound as a LIKE parameter (with % and _ escaped),
never spliced into the query text.
"""

from __future__ import annotations

import enum
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import CarModel, CarPart, CarPartLink


class SearchKind(enum.Enum):
    MODEL = "models"
    PART = "parts"


class PartLink(NamedTuple):
    """One row of a model's detail view."""
    part_name: str
    part_number: str
    is_primary: bool


class ModelLink(NamedTuple):
    """One row of a part's detail view."""
    model_name: str
    is_primary: bool


# kind → (entity, column matched by the search term)
_SEARCH_TARGETS = {
    SearchKind.MODEL: (CarModel, CarModel.name),
    SearchKind.PART:  (CarPart, CarPart.part_number),
}


class SearchService:

    @staticmethod
    def search(session: Session, kind: SearchKind, term: str = "") -> list:
        """
        All rows of the kind's table when ``term`` is empty, else the
        rows whose match column contains ``term``.  Rows come back in
        insertion order.
        """
        entity, column = _SEARCH_TARGETS[SearchKind(kind)]
        stmt = select(entity)
        if term:
            stmt = stmt.where(column.contains(term, autoescape=True))
        stmt = stmt.order_by(entity.id)
        return list(session.scalars(stmt).all())

    @staticmethod
    def links_for_model(session: Session, model_id: int) -> list[PartLink]:
        stmt = (
            select(CarPart.name, CarPart.part_number, CarPartLink.is_primary)
            .join(CarPartLink, CarPartLink.part_id == CarPart.id)
            .where(CarPartLink.model_id == model_id)
            .order_by(CarPart.id)
        )
        return [PartLink(name, pn, bool(primary))
                for name, pn, primary in session.execute(stmt)]

    @staticmethod
    def links_for_part(session: Session, part_id: int) -> list[ModelLink]:
        stmt = (
            select(CarModel.name, CarPartLink.is_primary)
            .join(CarPartLink, CarPartLink.model_id == CarModel.id)
            .where(CarPartLink.part_id == part_id)
            .order_by(CarModel.id)
        )
        return [ModelLink(name, bool(primary))
                for name, primary in session.execute(stmt)]
