"""Scorecard schema definitions."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class ScorecardHeader(BaseModel):
    match_id: int
    title: str
    match_date: date
    ground: Optional[str] = None
    match_type: str
    home_team: str
    away_team: str
    result: str
    victory_type: str
    how_much: int
    winner: Optional[str] = None
    loser: Optional[str] = None
    balls_per_over: int
    series_date: str


class BattingLine(BaseModel):
    player_id: int
    name: str
    position: int
    dismissal: str
    score: Optional[int] = None
    not_out: bool
    balls: Optional[int] = None
    minutes: Optional[int] = None
    fours: int
    sixes: int
    captain: bool
    wicket_keeper: bool


class BowlingLine(BaseModel):
    player_id: int
    name: str
    overs: Optional[str] = None
    maidens: Optional[int] = None
    dots: Optional[int] = None
    runs: int
    wickets: int
    wides: Optional[int] = None
    no_balls: Optional[int] = None
    economy: Optional[float] = None


class FallOfWicketLine(BaseModel):
    wicket: int
    score: Optional[int] = None
    player_id: int
    name: str
    overs: str


class PartnershipLine(BaseModel):
    wicket: int
    runs: int
    unbroken: bool
    player_names: str


class Extras(BaseModel):
    total: int
    byes: int
    leg_byes: int
    wides: int
    no_balls: int
    penalties: int


class InningsCard(BaseModel):
    innings_order: int
    innings_number: int
    team: Optional[str] = None
    opponents: Optional[str] = None
    total: int
    wickets: int
    overs: Optional[str] = None
    declared: bool
    extras: Extras
    batting: List[BattingLine]
    bowling: List[BowlingLine]
    fall_of_wickets: List[FallOfWicketLine]
    partnerships: List[PartnershipLine]


class Scorecard(BaseModel):
    header: ScorecardHeader
    innings: List[InningsCard]
