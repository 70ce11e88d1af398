"""Common API dependencies."""
from datetime import date
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from cricstats.core.config import settings
from cricstats.db.session import get_db
from cricstats.schemas.records import PagedRecords
from cricstats.services.records.criteria import (
    DateRange,
    Pagination,
    QualificationFilter,
    SortDirection,
    SortSpec,
)
from cricstats.services.records.errors import InvalidSortFieldError
from cricstats.services.records.paginator import PagedResult
from cricstats.services.records.sort_order import SortOrder


def get_db_session(db: Session = Depends(get_db)) -> Session:
    return db


def qualification_filter(
    match_type: str = Query(..., max_length=8, description="Match type code, e.g. t or odi"),
    match_sub_type: str = Query("", max_length=8),
    team_id: int = Query(0, ge=0),
    opponents_id: int = Query(0, ge=0),
    ground_id: int = Query(0, ge=0),
    host_country_id: int = Query(0, ge=0),
    season: str = Query("", description="Series date label; empty, 0 or 'All Seasons' for any"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    result: int = Query(0, ge=0, le=15, description="Result bitmask: won 1, lost 2, drawn 4, tied 8"),
    venue: int = Query(0, ge=0, le=7, description="Venue bitmask: home 1, away 2, neutral 4"),
    threshold: int = Query(settings.DEFAULT_MINIMUM_THRESHOLD, ge=0),
    offset: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: int = Query(int(SortOrder.RUNS), ge=0),
    direction: SortDirection = SortDirection.DESC,
) -> QualificationFilter:
    """Build the criteria shared by every records endpoint from query parameters."""
    try:
        sort_field = SortOrder(sort)
    except ValueError:
        raise InvalidSortFieldError(sort) from None
    date_range = None
    if start_date or end_date:
        date_range = DateRange(start_date or date.min, end_date or date.max)
    return QualificationFilter(
        match_type=match_type,
        match_sub_type=match_sub_type,
        team_id=team_id,
        opponents_id=opponents_id,
        ground_id=ground_id,
        host_country_id=host_country_id,
        season=season,
        date_range=date_range,
        result_mask=result,
        venue_mask=venue,
        minimum_threshold=threshold,
        pagination=Pagination(offset=offset, page_size=page_size),
        sort=SortSpec(field=sort_field, direction=direction),
    )


def paged(result: PagedResult, criteria: QualificationFilter) -> PagedRecords:
    return PagedRecords(
        rows=result.rows,
        total_count=result.total_count,
        offset=criteria.pagination.offset,
        page_size=criteria.pagination.page_size,
    )
