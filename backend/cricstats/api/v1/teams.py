"""Team records endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cricstats.api.deps import get_db_session, paged, qualification_filter
from cricstats.schemas.records import PagedRecords
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension
from cricstats.services.team_service import TeamService

router = APIRouter()


@router.get("/innings-by-innings", response_model=PagedRecords)
def innings_by_innings(
    team_batting: bool = Query(True, description="False reports totals conceded"),
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(TeamService(db).innings_by_innings(criteria, team_batting), criteria)


@router.get("/extras", response_model=PagedRecords)
def extras(
    dimension: Dimension = Dimension.CAREER,
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(TeamService(db).extras(criteria, dimension), criteria)


@router.get("/extras/innings-by-innings", response_model=PagedRecords)
def extras_innings_by_innings(
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(TeamService(db).extras_innings_by_innings(criteria), criteria)


@router.get("/targets/lowest-defended", response_model=PagedRecords)
def lowest_targets_defended(
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    """Lowest targets defended; the threshold is an upper bound here."""
    return paged(TeamService(db).lowest_targets_defended(criteria), criteria)


@router.get("/targets/highest-chased", response_model=PagedRecords)
def highest_targets_chased(
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(TeamService(db).highest_targets_chased(criteria), criteria)


@router.get("/{dimension}", response_model=PagedRecords)
def summary(
    dimension: Dimension,
    team_batting: bool = Query(True, description="False reports totals conceded"),
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(TeamService(db).summary(criteria, dimension, team_batting), criteria)
