"""Scorecard endpoints."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cricstats.api.deps import get_db_session
from cricstats.schemas.scorecard import Scorecard
from cricstats.services.records.errors import NotFound
from cricstats.services.records.result import Result
from cricstats.services.scorecard_service import ScorecardService

router = APIRouter()


def _unwrap(result: Result) -> Scorecard:
    if result.is_ok:
        return result.value
    if isinstance(result.error, NotFound):
        raise HTTPException(status_code=404, detail=result.error.message)
    raise HTTPException(status_code=503, detail=result.error.message)


@router.get("", response_model=Scorecard)
def find_scorecard(
    home: str = Query(..., min_length=1),
    away: str = Query(..., min_length=1),
    match_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db_session),
) -> Scorecard:
    """Look a scorecard up by home team, away team and start date."""
    return _unwrap(ScorecardService(db).get_by_teams(home, away, match_date))


@router.get("/{match_id}", response_model=Scorecard)
def get_scorecard(match_id: int, db: Session = Depends(get_db_session)) -> Scorecard:
    return _unwrap(ScorecardService(db).get_by_id(match_id))
