"""Normalized search criteria shared by every records query."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from cricstats.services.records.sort_order import SortOrder

# Season labels that mean "no season restriction"
ALL_SEASONS_SENTINELS = frozenset({"", "0", "All Seasons"})


class SortDirection(str, enum.Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True)
class Pagination:
    offset: int = 0
    page_size: int = 50

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("offset must be >= 0")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")


@dataclass(frozen=True)
class SortSpec:
    field: SortOrder = SortOrder.RUNS
    direction: SortDirection = SortDirection.DESC

    @property
    def ascending(self) -> bool:
        return self.direction == SortDirection.ASC


@dataclass(frozen=True)
class QualificationFilter:
    """Criteria a match and a performance must satisfy to be counted.

    Zero ids, zero masks and empty strings are wildcards; nothing downstream
    treats them as real values.
    """

    match_type: str
    match_sub_type: str = ""
    team_id: int = 0
    opponents_id: int = 0
    ground_id: int = 0
    host_country_id: int = 0
    season: str = ""
    date_range: Optional[DateRange] = None
    result_mask: int = 0
    venue_mask: int = 0
    minimum_threshold: int = 0
    pagination: Pagination = field(default_factory=Pagination)
    sort: SortSpec = field(default_factory=SortSpec)

    @property
    def has_season(self) -> bool:
        return self.season not in ALL_SEASONS_SENTINELS
