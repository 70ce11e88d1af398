"""Shared request flow for the paged records services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence

import pandas as pd
from sqlalchemy.orm import Session

from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import DimensionKey
from cricstats.services.records.extractor import DetailExtractor
from cricstats.services.records.paginator import PagedResult, ResultPaginator
from cricstats.services.records.sort_order import SortableFields
from cricstats.services.records.staging import request_staging

# Row identity for records that list single performances
INNINGS_TIE_BREAKERS = ("match_id", "innings_order", "player_id")
MATCH_TIE_BREAKERS = ("match_id", "player_id")


def summary_tie_breakers(key: DimensionKey, entity: Sequence[str] = ("player_id",)) -> List[str]:
    return [*entity, "match_type", *key.key_columns]


def select_columns(frame: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    return frame[[column for column in columns if column in frame.columns]]


@dataclass
class RecordsService:
    db: Session

    def run(
        self,
        criteria: QualificationFilter,
        fields: SortableFields,
        tie_breakers: Sequence[str],
        build: Callable[[DetailExtractor], pd.DataFrame],
    ) -> PagedResult:
        """Validate the sort, build the result frame inside a staging scope, then page it."""
        paginator = ResultPaginator(fields, tuple(tie_breakers))
        paginator.validate(criteria.sort)
        with request_staging(self.db) as staging:
            frame = build(DetailExtractor(self.db, staging, criteria))
        return paginator.paginate(frame, criteria.sort, criteria.pagination)
