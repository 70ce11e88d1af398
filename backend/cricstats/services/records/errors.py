"""Errors raised or returned by the records engine."""
from __future__ import annotations

from dataclasses import dataclass


class RecordsError(Exception):
    """Base class for records engine failures."""


class InvalidSortFieldError(RecordsError):
    def __init__(self, sort_field) -> None:
        self.sort_field = sort_field
        name = getattr(sort_field, "name", str(sort_field))
        super().__init__(f"Sort field {name} is not available for this record type")


class DataSourceError(RecordsError):
    """The database could not be reached or a query failed."""


@dataclass(frozen=True)
class NotFound:
    message: str


@dataclass(frozen=True)
class DataSourceFailure:
    message: str
