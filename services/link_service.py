"""
services.link_service - Create and delete models/parts with their links.

All session management is the caller's responsibility.  Every method
here is meant to run inside one StoreEngine.transaction() so that the
row and its links commit together or not at all.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from db.models import CarModel, CarPart, CarPartLink
from services.errors import DuplicateName, DuplicatePartNumber, NotFound

logger = logging.getLogger(__name__)


class LinkService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get_model(session: Session, model_id: int) -> CarModel:
        model = session.get(CarModel, model_id)
        if model is None:
            raise NotFound("Model", model_id)
        return model

    @staticmethod
    def get_part(session: Session, part_id: int) -> CarPart:
        part = session.get(CarPart, part_id)
        if part is None:
            raise NotFound("Part", part_id)
        return part

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create_model(session: Session, name: str, part_ids: Iterable[int] = ()) -> int:
        """
        Insert a model plus one secondary link per existing part.

        A new model is never primary for an existing part.  Part ids
        that no longer exist are skipped.
        """
        if not name or not name.strip():
            raise ValueError("Model name is required")
        exists = session.scalar(select(CarModel.id).where(CarModel.name == name))
        if exists is not None:
            raise DuplicateName(name)

        model = CarModel(name=name)
        session.add(model)
        session.flush()

        for part_id in sorted(set(part_ids)):
            if session.get(CarPart, part_id) is None:
                logger.info("Skipping link to missing part %s", part_id)
                continue
            LinkService.add_link(session, model.id, part_id)

        logger.info("Created model %s %r", model.id, name)
        return model.id

    @staticmethod
    def create_part(
        session: Session,
        part_number: str,
        name: str,
        model_ids: Iterable[int] = (),
    ) -> int:
        """Insert a part plus one secondary link per existing model."""
        if not part_number or not part_number.strip():
            raise ValueError("Part number is required")
        name = name or ""
        exists = session.scalar(
            select(CarPart.id).where(CarPart.part_number == part_number)
        )
        if exists is not None:
            raise DuplicatePartNumber(part_number)

        part = CarPart(part_number=part_number, name=name)
        session.add(part)
        session.flush()

        for model_id in sorted(set(model_ids)):
            if session.get(CarModel, model_id) is None:
                logger.info("Skipping link to missing model %s", model_id)
                continue
            LinkService.add_link(session, model_id, part.id)

        logger.info("Created part %s %r", part.id, part_number)
        return part.id

    @staticmethod
    def add_link(session: Session, model_id: int, part_id: int,
                 is_primary: bool = False) -> CarPartLink:
        link = CarPartLink(model_id=model_id, part_id=part_id, is_primary=is_primary)
        session.add(link)
        session.flush()
        return link

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete_model(session: Session, model_id: int) -> int:
        """Delete the model's links, then the model.  Returns links removed."""
        model = LinkService.get_model(session, model_id)
        removed = session.execute(
            delete(CarPartLink).where(CarPartLink.model_id == model.id)
        ).rowcount
        session.execute(delete(CarModel).where(CarModel.id == model.id))
        logger.info("Deleted model %s and %d links", model_id, removed)
        return removed

    @staticmethod
    def delete_part(session: Session, part_id: int) -> int:
        """Delete the part's links, then the part.  Returns links removed."""
        part = LinkService.get_part(session, part_id)
        removed = session.execute(
            delete(CarPartLink).where(CarPartLink.part_id == part.id)
        ).rowcount
        session.execute(delete(CarPart).where(CarPart.id == part.id))
        logger.info("Deleted part %s and %d links", part_id, removed)
        return removed
