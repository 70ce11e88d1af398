"""Request-scoped temporary tables for intermediate result sets.

Every table created here is a connection-local temporary table whose name
carries a token unique to the request, so concurrent requests never share
staging data. Tables are dropped when the ``request_staging`` block exits,
whatever the exit path.
"""
from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Iterator, List

import pandas as pd
from sqlalchemy import Column, MetaData, Table, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from cricstats.core.logging import get_logger
from cricstats.services.records.errors import DataSourceError

logger = get_logger(__name__)


class RequestStaging:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.token = uuid.uuid4().hex[:12]
        self._metadata = MetaData()
        self._tables: List[Table] = []

    @property
    def table_names(self) -> List[str]:
        return [table.name for table in self._tables]

    def name_for(self, purpose: str) -> str:
        return f"tmp_{purpose}_{self.token}"

    def materialize(self, purpose: str, query: Select) -> Table:
        """Create a temporary table shaped like ``query`` and fill it from it."""
        name = self.name_for(purpose)
        if name in self._metadata.tables:
            name = self.name_for(f"{purpose}{len(self._tables)}")
        columns = [Column(column.name, column.type) for column in query.selected_columns]
        table = Table(name, self._metadata, *columns, prefixes=["TEMPORARY"])
        connection = self.db.connection()
        table.create(connection)
        self._tables.append(table)
        connection.execute(table.insert().from_select([column.name for column in columns], query))
        logger.debug("staging_table_created", table=table.name)
        return table

    def read(self, table: Table) -> pd.DataFrame:
        return self.read_query(select(table))

    def read_query(self, query: Select) -> pd.DataFrame:
        return pd.read_sql(query, self.db.connection())

    def teardown(self) -> None:
        if not self._tables:
            return
        try:
            connection = self.db.connection()
            for table in reversed(self._tables):
                table.drop(connection)
        except SQLAlchemyError:
            # A failed statement can leave the transaction unusable; rolling
            # back discards the temporary tables created inside it.
            logger.warning("staging_teardown_rollback", token=self.token, exc_info=True)
            self.db.rollback()
        else:
            logger.debug("staging_dropped", token=self.token, tables=len(self._tables))
        finally:
            self._tables.clear()
            self._metadata.clear()


@contextmanager
def request_staging(db: Session) -> Iterator[RequestStaging]:
    """Yield a :class:`RequestStaging` and always tear it down.

    SQLAlchemy failures inside the block surface as :class:`DataSourceError`.
    """
    staging = RequestStaging(db)
    try:
        yield staging
    except (SQLAlchemyError, pd.errors.DatabaseError) as exc:
        logger.error("records_query_failed", token=staging.token, error=str(exc))
        raise DataSourceError("Records query failed") from exc
    finally:
        staging.teardown()
