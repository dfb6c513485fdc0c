"""
import_engine.row_processor - Apply one spreadsheet row to the catalog.

Row layout (header row ignored, columns by position):

    id, part number, designed-for model, part name, compatible models

"compatible models" is a comma separated list of model names.  This is
the only code path that marks a link primary, and it keeps at most one
primary link per part.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from db.models import CarModel, CarPart, CarPartLink


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


class RowProcessor:
    """
    Stateful processor that remembers model name → id lookups within an
    import run so repeated names don't hit the database every row.
    """

    def __init__(self):
        self._model_ids: dict[str, int] = {}

    def process(self, session: Session, cells: list[str]) -> bool:
        """
        Apply one row.  Returns True when a new part row was inserted,
        False when the part id already existed (kept as is).
        Raises RowError before writing anything if the row is invalid.
        """
        part_id, part_number, designed_for, name, compatible = self._unpack(cells)

        part = session.get(CarPart, part_id)
        created = part is None
        if created:
            clash = session.scalar(
                select(CarPart.id).where(CarPart.part_number == part_number)
            )
            if clash is not None:
                raise RowError(
                    f"Part number {part_number} already used by part {clash}"
                )
            session.add(CarPart(id=part_id, part_number=part_number, name=name))
            session.flush()

        primary_id = self._ensure_model(session, designed_for)
        self._set_primary(session, primary_id, part_id)

        for model_name in _split_names(compatible):
            model_id = self._ensure_model(session, model_name)
            if session.get(CarPartLink, (model_id, part_id)) is None:
                session.add(CarPartLink(model_id=model_id, part_id=part_id,
                                        is_primary=False))
        session.flush()
        return created

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _unpack(cells: list[str]):
        cells = list(cells) + [""] * (5 - len(cells))
        raw_id, part_number, designed_for, name, compatible = cells[:5]

        if not raw_id:
            raise RowError("Missing part id")
        try:
            part_id = int(raw_id)
        except ValueError:
            try:
                as_float = float(raw_id)
            except ValueError:
                raise RowError(f"Part id {raw_id!r} is not a number") from None
            if not as_float.is_integer():
                raise RowError(f"Part id {raw_id!r} is not an integer")
            part_id = int(as_float)
        if not part_number:
            raise RowError("Missing part number")
        if not designed_for:
            raise RowError("Missing designed-for model")
        return part_id, part_number, designed_for, name, compatible

    def _ensure_model(self, session: Session, name: str) -> int:
        """Return the id of the model called ``name``, creating it if absent."""
        if name in self._model_ids:
            return self._model_ids[name]
        model_id = session.scalar(select(CarModel.id).where(CarModel.name == name))
        if model_id is None:
            model = CarModel(name=name)
            session.add(model)
            session.flush()
            model_id = model.id
        self._model_ids[name] = model_id
        return model_id

    @staticmethod
    def _set_primary(session: Session, model_id: int, part_id: int) -> None:
        # Demote any other primary first; one designed-for model per part
        session.execute(
            update(CarPartLink)
            .where(CarPartLink.part_id == part_id,
                   CarPartLink.model_id != model_id)
            .values(is_primary=False)
        )
        link = session.get(CarPartLink, (model_id, part_id))
        if link is None:
            session.add(CarPartLink(model_id=model_id, part_id=part_id,
                                    is_primary=True))
        else:
            link.is_primary = True
        session.flush()


def _split_names(value: str) -> list[str]:
    names = [s.strip() for s in (value or "").split(",") if s.strip()]
    return list(dict.fromkeys(names))
