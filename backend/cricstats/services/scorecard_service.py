"""Scorecard service layer.

A scorecard is assembled in steps (match, innings, batting, bowling, fall of
wickets, partnerships). Each step returns a Result and the chain stops at the
first failure.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Dict, List, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased, joinedload

from cricstats.core.logging import get_logger
from cricstats.db import models
from cricstats.services.records.errors import DataSourceFailure, NotFound
from cricstats.services.records.formulas import overs
from cricstats.services.records.result import Err, Ok, Result

logger = get_logger(__name__)

T = TypeVar("T")

# Header relationships loaded with the match so the build step issues no queries
MATCH_HEADER = (
    joinedload(models.Match.home_team),
    joinedload(models.Match.away_team),
    joinedload(models.Match.ground),
)


@dataclass(frozen=True)
class ScorecardParts:
    match: models.Match
    innings: List[models.Innings] = field(default_factory=list)
    batting: List[tuple] = field(default_factory=list)
    bowling: List[tuple] = field(default_factory=list)
    fall_of_wickets: List[tuple] = field(default_factory=list)
    partnerships: List[models.Partnership] = field(default_factory=list)


def _victory_type_name(code: int) -> str:
    try:
        name = models.VictoryType(code).name
    except ValueError:
        name = models.VictoryType.UNKNOWN.name
    return "".join(part.capitalize() for part in name.split("_"))


@dataclass
class ScorecardService:
    db: Session

    def _guarded(self, step: str, query: Callable[[], T]) -> Result:
        try:
            return Ok(query())
        except SQLAlchemyError as exc:
            logger.error("scorecard_step_failed", step=step, error=str(exc))
            return Err(DataSourceFailure(f"Could not load {step}"))

    def get_by_id(self, match_id: int) -> Result:
        found = self._guarded("match", lambda: self.db.get(models.Match, match_id, options=MATCH_HEADER))
        return self._assemble(found, f"Match {match_id} not found")

    def get_by_teams(self, home: str, away: str, match_date: date) -> Result:
        home_team = aliased(models.Team)
        away_team = aliased(models.Team)
        query = (
            select(models.Match)
            .options(*MATCH_HEADER)
            .join(home_team, home_team.id == models.Match.home_team_id)
            .join(away_team, away_team.id == models.Match.away_team_id)
            .where(
                home_team.name == home,
                away_team.name == away,
                models.Match.match_start_date == match_date,
            )
            .order_by(models.Match.id)
        )
        found = self._guarded("match", lambda: self.db.scalars(query).first())
        return self._assemble(found, f"No match between {home} and {away} on {match_date.isoformat()}")

    def _assemble(self, found: Result, missing: str) -> Result:
        return (
            found.and_then(lambda match: Ok(ScorecardParts(match)) if match else Err(NotFound(missing)))
            .and_then(self._innings)
            .and_then(self._batting)
            .and_then(self._bowling)
            .and_then(self._fall_of_wickets)
            .and_then(self._partnerships)
            .and_then(lambda parts: self._guarded("scorecard", lambda: self._build(parts)))
        )

    def _innings(self, parts: ScorecardParts) -> Result:
        query = (
            select(models.Innings)
            .where(models.Innings.match_id == parts.match.id)
            .order_by(models.Innings.innings_order)
        )
        loaded = self._guarded("innings", lambda: list(self.db.scalars(query)))
        return loaded.and_then(
            lambda innings: Ok(replace(parts, innings=innings))
            if innings
            else Err(NotFound(f"No innings recorded for match {parts.match.id}"))
        )

    def _batting(self, parts: ScorecardParts) -> Result:
        detail = models.BattingDetail
        query = (
            select(detail, models.Player.full_name)
            .join(models.Player, models.Player.id == detail.player_id)
            .where(detail.match_id == parts.match.id, detail.player_id != models.TEAM_TOTAL_PLAYER_ID)
            .order_by(detail.innings_order, detail.position)
        )
        return self._guarded("batting", lambda: list(self.db.execute(query))).map(
            lambda rows: replace(parts, batting=rows)
        )

    def _bowling(self, parts: ScorecardParts) -> Result:
        detail = models.BowlingDetail
        query = (
            select(detail, models.Player.full_name)
            .join(models.Player, models.Player.id == detail.player_id)
            .where(detail.match_id == parts.match.id, detail.player_id != models.TEAM_TOTAL_PLAYER_ID)
            .order_by(detail.innings_order, detail.position)
        )
        return self._guarded("bowling", lambda: list(self.db.execute(query))).map(
            lambda rows: replace(parts, bowling=rows)
        )

    def _fall_of_wickets(self, parts: ScorecardParts) -> Result:
        fow = models.FallOfWicket
        query = (
            select(fow, models.Player.full_name)
            .join(models.Player, models.Player.id == fow.player_id)
            .where(fow.match_id == parts.match.id)
            .order_by(fow.innings_order, fow.wicket)
        )
        return self._guarded("fall of wickets", lambda: list(self.db.execute(query))).map(
            lambda rows: replace(parts, fall_of_wickets=rows)
        )

    def _partnerships(self, parts: ScorecardParts) -> Result:
        query = (
            select(models.Partnership)
            .where(models.Partnership.match_id == parts.match.id, models.Partnership.multiple == 0)
            .order_by(models.Partnership.innings_order, models.Partnership.wicket)
        )
        return self._guarded("partnerships", lambda: list(self.db.scalars(query))).map(
            lambda rows: replace(parts, partnerships=rows)
        )

    def _build(self, parts: ScorecardParts) -> Dict:
        match = parts.match
        batting: Dict[int, List[Dict]] = defaultdict(list)
        for detail, name in parts.batting:
            batting[detail.innings_order].append(
                {
                    "player_id": detail.player_id,
                    "name": name,
                    "position": detail.position,
                    "dismissal": detail.dismissal,
                    "score": detail.score,
                    "not_out": bool(detail.not_out),
                    "balls": detail.balls,
                    "minutes": detail.minutes,
                    "fours": detail.fours,
                    "sixes": detail.sixes,
                    "captain": bool(detail.captain),
                    "wicket_keeper": bool(detail.wicket_keeper),
                }
            )
        bowling: Dict[int, List[Dict]] = defaultdict(list)
        for detail, name in parts.bowling:
            bowling[detail.innings_order].append(
                {
                    "player_id": detail.player_id,
                    "name": name,
                    "overs": overs(detail.balls, match.balls_per_over),
                    "maidens": detail.maidens,
                    "dots": detail.dots,
                    "runs": detail.runs,
                    "wickets": detail.wickets,
                    "wides": detail.wides,
                    "no_balls": detail.no_balls,
                    "economy": _economy(detail.runs, detail.balls),
                }
            )
        fall_of_wickets: Dict[int, List[Dict]] = defaultdict(list)
        for fow, name in parts.fall_of_wickets:
            fall_of_wickets[fow.innings_order].append(
                {"wicket": fow.wicket, "score": fow.score, "player_id": fow.player_id, "name": name, "overs": fow.overs}
            )
        partnerships: Dict[int, List[Dict]] = defaultdict(list)
        for partnership in parts.partnerships:
            partnerships[partnership.innings_order].append(
                {
                    "wicket": partnership.wicket,
                    "runs": partnership.partnership,
                    "unbroken": bool(partnership.unbroken),
                    "player_names": partnership.player_names,
                }
            )
        teams = {match.home_team_id: match.home_team.name, match.away_team_id: match.away_team.name}
        return {
            "header": {
                "match_id": match.id,
                "title": match.match_title,
                "match_date": match.match_start_date,
                "ground": match.ground.known_as if match.ground else None,
                "match_type": match.match_type,
                "home_team": match.home_team.name,
                "away_team": match.away_team.name,
                "result": match.result_string,
                "victory_type": _victory_type_name(match.victory_type),
                "how_much": match.how_much,
                "winner": teams.get(match.who_won_id),
                "loser": teams.get(match.who_lost_id),
                "balls_per_over": match.balls_per_over,
                "series_date": match.series_date,
            },
            "innings": [
                {
                    "innings_order": innings.innings_order,
                    "innings_number": innings.innings_number,
                    "team": teams.get(innings.team_id),
                    "opponents": teams.get(innings.opponents_id),
                    "total": innings.total,
                    "wickets": innings.wickets,
                    "overs": overs(innings.balls, match.balls_per_over),
                    "declared": bool(innings.declared),
                    "extras": {
                        "total": innings.extras,
                        "byes": innings.byes,
                        "leg_byes": innings.leg_byes,
                        "wides": innings.wides,
                        "no_balls": innings.no_balls,
                        "penalties": innings.penalties,
                    },
                    "batting": batting.get(innings.innings_order, []),
                    "bowling": bowling.get(innings.innings_order, []),
                    "fall_of_wickets": fall_of_wickets.get(innings.innings_order, []),
                    "partnerships": partnerships.get(innings.innings_order, []),
                }
                for innings in parts.innings
            ],
        }


def _economy(runs: Optional[int], balls: Optional[int]) -> Optional[float]:
    if not balls or runs is None:
        return None
    return int(runs * 600 / balls) / 100
