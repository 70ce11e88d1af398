"""Fielding records endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cricstats.api.deps import get_db_session, paged, qualification_filter
from cricstats.schemas.records import PagedRecords
from cricstats.services.fielding_service import FieldingService
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension

router = APIRouter()


@router.get("/innings-by-innings", response_model=PagedRecords)
def innings_by_innings(
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(FieldingService(db).innings_by_innings(criteria), criteria)


@router.get("/match-totals", response_model=PagedRecords)
def match_totals(
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(FieldingService(db).match_totals(criteria), criteria)


@router.get("/{dimension}", response_model=PagedRecords)
def summary(
    dimension: Dimension,
    criteria: QualificationFilter = Depends(qualification_filter),
    db: Session = Depends(get_db_session),
) -> PagedRecords:
    return paged(FieldingService(db).summary(criteria, dimension), criteria)
