from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from tracker_sync.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    def add(self, obj: ModelT, *, flush: bool = True) -> ModelT:
        self.session.add(obj)
        if flush:
            self.session.flush()  # assigns PKs, etc.
        return obj

    def first_where(self, *predicates: ColumnElement[bool]) -> ModelT | None:
        stmt = select(self.model).where(*predicates).limit(1)
        return self.session.execute(stmt).scalars().first()

    def list_where(self, *predicates: ColumnElement[bool], order_by: Any = None) -> list[ModelT]:
        stmt = select(self.model).where(*predicates)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(self.session.execute(stmt).scalars().all())

    def delete_where(self, *predicates: ColumnElement[bool], flush: bool = True) -> int:
        result = self.session.execute(delete(self.model).where(*predicates))
        if flush:
            self.session.flush()
        return int(result.rowcount or 0)

    def patch(self, obj: ModelT, changes: Mapping[str, Any], *, flush: bool = True) -> ModelT:
        """Apply non-None changes only."""
        for k, v in changes.items():
            if v is None:
                continue
            setattr(obj, k, v)
        if flush:
            self.session.flush()
        return obj

    def overwrite(self, obj: ModelT, values: Mapping[str, Any], *, flush: bool = True) -> ModelT:
        """Apply every value, None included (last write wins)."""
        for k, v in values.items():
            setattr(obj, k, v)
        if flush:
            self.session.flush()
        return obj

    def upsert(
        self,
        key: Mapping[str, Any],
        values: Mapping[str, Any],
        *,
        flush: bool = True,
    ) -> tuple[ModelT, bool]:
        """Insert or fully overwrite the row identified by its natural `key`.

        Returns `(row, created)`.
        """
        predicates = [getattr(self.model, k) == v for k, v in key.items()]
        existing = self.first_where(*predicates)
        if existing is None:
            return self.add(self.model(**key, **values), flush=flush), True
        return self.overwrite(existing, values, flush=flush), False
