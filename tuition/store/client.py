from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

from sqlalchemy import func, inspect, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from tuition.config import settings
from tuition.core.errors import NotFoundError, StoreError
from tuition.core.retry import RetryPolicy


logger = logging.getLogger(__name__)

T = TypeVar('T')
Row = Mapping[str, Any]


def is_transient_store_error(exc: Exception) -> bool:
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)


def _column_name(model, attr: str) -> str:
    return inspect(model).attrs[attr].columns[0].name


def _order_clause(model, spec: str):
    descending = spec.startswith('-')
    column = getattr(model, spec.lstrip('-'))
    return column.desc() if descending else column.asc()


class StoreClient:
    """Generic query/command surface over the four record collections.

    Every call runs in its own session and transaction so calls can be
    issued from worker threads concurrently. Reads and idempotent writes
    (update-by-id, upsert) are retried on transient failures; inserts and
    deletes run once.
    """

    def __init__(self, session_factory: sessionmaker, *, retry: RetryPolicy | None = None) -> None:
        self._session_factory = session_factory
        self.retry = retry or RetryPolicy(
            base_seconds=settings.store_retry_base_seconds,
            max_attempts=settings.store_retry_attempts,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _call(self, operation: str, fn: Callable[[Session], T], *, retry: bool) -> T:
        def attempt() -> T:
            with self.session() as db:
                return fn(db)

        try:
            if retry:
                return self.retry.run(attempt, is_transient=is_transient_store_error, label=operation)
            return attempt()
        except SQLAlchemyError as exc:
            raise StoreError(operation, str(exc), transient=is_transient_store_error(exc)) from exc

    def read(self, operation: str, fn: Callable[[Session], T]) -> T:
        return self._call(operation, fn, retry=True)

    def select(
        self,
        model,
        *,
        where: Row | None = None,
        order_by: Sequence[str] = (),
    ) -> list:
        def run(db: Session) -> list:
            stmt = select(model)
            for attr, value in (where or {}).items():
                stmt = stmt.where(getattr(model, attr) == value)
            stmt = stmt.order_by(*(_order_clause(model, spec) for spec in order_by))
            return list(db.scalars(stmt).all())

        return self._call(f'select:{model.__tablename__}', run, retry=True)

    def count(self, model, *, where: Row | None = None) -> int:
        def run(db: Session) -> int:
            stmt = select(func.count()).select_from(model)
            for attr, value in (where or {}).items():
                stmt = stmt.where(getattr(model, attr) == value)
            return int(db.scalar(stmt) or 0)

        return self._call(f'count:{model.__tablename__}', run, retry=True)

    def get(self, model, record_id: str):
        return self._call(f'get:{model.__tablename__}', lambda db: db.get(model, record_id), retry=True)

    def insert(self, model, rows: Row | Sequence[Row]) -> list:
        batch = [rows] if isinstance(rows, Mapping) else list(rows)

        def run(db: Session) -> list:
            objects = [model(**dict(row)) for row in batch]
            db.add_all(objects)
            db.flush()
            return objects

        return self._call(f'insert:{model.__tablename__}', run, retry=False)

    def update_by_id(self, model, record_id: str, values: Row):
        def run(db: Session):
            obj = db.get(model, record_id)
            if obj is None:
                raise NotFoundError(model.__name__, record_id)
            for attr, value in values.items():
                setattr(obj, attr, value)
            db.flush()
            return obj

        return self._call(f'update:{model.__tablename__}', run, retry=True)

    def update_where(self, model, record_id: str, values: Row, *, where: Row) -> int:
        """Update one row only while it still matches ``where``; returns the rows changed (0 or 1).

        The guard is evaluated inside the UPDATE statement. Not retried, since a
        lost reply would read back as a failed guard.
        """

        def run(db: Session) -> int:
            stmt = update(model).where(model.id == record_id)
            for attr, value in where.items():
                stmt = stmt.where(getattr(model, attr) == value)
            stmt = stmt.values(**dict(values)).execution_options(synchronize_session=False)
            return int(db.execute(stmt).rowcount or 0)

        return self._call(f'update_where:{model.__tablename__}', run, retry=False)

    def upsert(
        self,
        model,
        rows: Sequence[Row],
        *,
        conflict_keys: Sequence[str],
        update_columns: Sequence[str],
    ) -> int:
        """Insert rows, overwriting ``update_columns`` where ``conflict_keys`` already match.

        The whole batch runs in one transaction; any failure rolls back every row.
        """
        if not rows:
            return 0
        table = model.__table__
        index_elements = [_column_name(model, key) for key in conflict_keys]
        payload = [{_column_name(model, attr): value for attr, value in row.items()} for row in rows]

        def run(db: Session) -> int:
            dialect = db.get_bind().dialect.name
            if dialect == 'sqlite':
                base = sqlite_insert(table)
            elif dialect == 'postgresql':
                base = postgresql_insert(table)
            else:
                return self._upsert_by_lookup(db, model, rows, conflict_keys, update_columns)
            stmt = base.on_conflict_do_update(
                index_elements=index_elements,
                set_={
                    _column_name(model, attr): base.excluded[_column_name(model, attr)]
                    for attr in update_columns
                },
            )
            db.execute(stmt, payload)
            return len(payload)

        return self._call(f'upsert:{model.__tablename__}', run, retry=True)

    @staticmethod
    def _upsert_by_lookup(db: Session, model, rows, conflict_keys, update_columns) -> int:
        for row in rows:
            stmt = select(model)
            for key in conflict_keys:
                stmt = stmt.where(getattr(model, key) == row[key])
            existing = db.scalars(stmt).first()
            if existing is None:
                db.add(model(**dict(row)))
                continue
            for attr in update_columns:
                setattr(existing, attr, row[attr])
        db.flush()
        return len(rows)

    def delete_by_id(self, model, record_id: str) -> None:
        def run(db: Session) -> None:
            obj = db.get(model, record_id)
            if obj is None:
                raise NotFoundError(model.__name__, record_id)
            db.delete(obj)

        self._call(f'delete:{model.__tablename__}', run, retry=False)
