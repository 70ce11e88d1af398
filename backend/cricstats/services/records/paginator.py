"""Order a result frame and cut one page out of it."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import pandas as pd

from cricstats.core.logging import get_logger
from cricstats.services.records.criteria import Pagination, SortSpec
from cricstats.services.records.sort_order import SortableFields

logger = get_logger(__name__)


@dataclass(frozen=True)
class PagedResult:
    rows: List[Dict[str, Any]]
    total_count: int


def to_records(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """Public columns as plain Python values; columns starting with ``_`` are sort keys only."""
    visible = frame[[column for column in frame.columns if not str(column).startswith("_")]]
    visible = visible.astype(object).where(visible.notna(), None)
    return visible.to_dict(orient="records")


@dataclass(frozen=True)
class ResultPaginator:
    """Sort by the requested field, then the category's name column, then the partition keys.

    The trailing keys make the order total, so repeated requests page the same way.
    """

    fields: SortableFields
    tie_breakers: Sequence[str] = field(default_factory=tuple)

    def validate(self, sort: SortSpec) -> str:
        return self.fields.resolve(sort.field)

    def order(self, frame: pd.DataFrame, sort: SortSpec) -> pd.DataFrame:
        column = self.validate(sort)
        keys = [column]
        for extra in (self.fields.secondary, *self.tie_breakers):
            if extra in frame.columns and extra not in keys:
                keys.append(extra)
        ascending = [sort.ascending] + [True] * (len(keys) - 1)
        return frame.sort_values(by=keys, ascending=ascending, kind="mergesort", na_position="last")

    def paginate(self, frame: pd.DataFrame, sort: SortSpec, pagination: Pagination) -> PagedResult:
        self.validate(sort)
        total_count = len(frame)
        if frame.empty:
            return PagedResult(rows=[], total_count=0)
        ordered = self.order(frame, sort)
        page = ordered.iloc[pagination.offset : pagination.offset + pagination.page_size]
        logger.info(
            "page_served",
            sort=sort.field.name,
            direction=sort.direction.value,
            offset=pagination.offset,
            rows=len(page),
            total_count=total_count,
        )
        return PagedResult(rows=to_records(page), total_count=total_count)
