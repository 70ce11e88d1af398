"""Database models for the cricket records schema.

The schema is owned by the loading pipeline; this service only reads it.
Column semantics the engine relies on:

* ``ExtraMatchDetail.result`` is a bitmask from the team's point of view
  (won=1, lost=2, drawn=4, tied=8).
* ``ExtraMatchDetail.home_away`` is a bitmask (home=1, away=2, neutral=4).
* ``Match.victory_type`` holds a :class:`VictoryType` code.
* Player id 1 is the pseudo player used for team totals.
"""
from __future__ import annotations

import enum
from datetime import date
from typing import List

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, relationship

from cricstats.db.base import Base

TEAM_TOTAL_PLAYER_ID = 1


class VictoryType(enum.IntEnum):
    AWARDED = 0
    DRAWN = 1
    RUNS = 2
    WICKETS = 3
    INNINGS = 4
    TIED = 5
    ABANDONED = 6
    NO_RESULT = 7
    RUN_RATE = 8
    LOSING_FEWER_WICKETS = 9
    FASTER_SCORING_RATE = 10
    UNKNOWN = 11


class MatchResult(enum.IntFlag):
    WON = 1
    LOST = 2
    DRAWN = 4
    TIED = 8


class HomeAway(enum.IntFlag):
    HOME = 1
    AWAY = 2
    NEUTRAL = 4


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[int] = Column(Integer, primary_key=True, index=True)
    name: Mapped[str] = Column(String, unique=True, nullable=False)


class Ground(Base):
    __tablename__ = "grounds"

    id: Mapped[int] = Column(Integer, primary_key=True, index=True)
    known_as: Mapped[str] = Column(String, nullable=False)
    country_id: Mapped[int | None] = Column(Integer, ForeignKey("countries.id"), nullable=True)

    country: Mapped[Country | None] = relationship("Country")


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = Column(Integer, primary_key=True, index=True)
    name: Mapped[str] = Column(String, index=True, nullable=False)


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = Column(Integer, primary_key=True, index=True)
    full_name: Mapped[str] = Column(String, index=True, nullable=False)
    sort_name_part: Mapped[str] = Column(String, nullable=False)


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        Index("idx_matches_type_date", "match_type", "match_start_date"),
    )

    id: Mapped[int] = Column(Integer, primary_key=True, index=True)
    match_type: Mapped[str] = Column(String(8), nullable=False)
    match_title: Mapped[str] = Column(String, nullable=False)
    home_team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    away_team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    location_id: Mapped[int] = Column(Integer, ForeignKey("grounds.id"), nullable=False)
    home_country_id: Mapped[int] = Column(Integer, ForeignKey("countries.id"), nullable=False)
    series_date: Mapped[str] = Column(String(16), nullable=False)
    series_number: Mapped[int] = Column(Integer, nullable=False, default=0)
    match_start_date: Mapped[date] = Column(Date, nullable=False)
    match_start_year: Mapped[int] = Column(Integer, nullable=False)
    balls_per_over: Mapped[int] = Column(Integer, nullable=False, default=6)
    victory_type: Mapped[int] = Column(Integer, nullable=False, default=VictoryType.UNKNOWN)
    how_much: Mapped[int] = Column(Integer, nullable=False, default=0)
    who_won_id: Mapped[int | None] = Column(Integer, ForeignKey("teams.id"), nullable=True)
    who_lost_id: Mapped[int | None] = Column(Integer, ForeignKey("teams.id"), nullable=True)
    result_string: Mapped[str] = Column(String, nullable=False, default="")

    home_team: Mapped[Team] = relationship("Team", foreign_keys=[home_team_id])
    away_team: Mapped[Team] = relationship("Team", foreign_keys=[away_team_id])
    ground: Mapped[Ground] = relationship("Ground")
    team_details: Mapped[List["ExtraMatchDetail"]] = relationship(
        "ExtraMatchDetail", back_populates="match"
    )


class MatchSubType(Base):
    __tablename__ = "match_sub_types"

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), index=True, nullable=False)
    match_type: Mapped[str] = Column(String(8), nullable=False)


class ExtraMatchDetail(Base):
    """One row per team per match."""

    __tablename__ = "extra_match_details"
    __table_args__ = (UniqueConstraint("match_id", "team_id", name="uq_extra_match_team"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), index=True, nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    opponents_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    result: Mapped[int] = Column(Integer, nullable=False, default=0)
    home_away: Mapped[int] = Column(Integer, nullable=False, default=0)

    match: Mapped[Match] = relationship("Match", back_populates="team_details")


class PlayerMatch(Base):
    __tablename__ = "players_matches"
    __table_args__ = (Index("idx_players_matches_player", "player_id", "match_id"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), nullable=False)
    player_id: Mapped[int] = Column(Integer, ForeignKey("players.id"), nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    is_substitute_fielder: Mapped[int] = Column(Integer, nullable=False, default=0)


class BattingDetail(Base):
    __tablename__ = "batting_details"
    __table_args__ = (Index("idx_batting_match_player", "match_id", "player_id"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), nullable=False)
    match_type: Mapped[str] = Column(String(8), nullable=False)
    player_id: Mapped[int] = Column(Integer, ForeignKey("players.id"), nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    opponents_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    innings_number: Mapped[int] = Column(Integer, nullable=False)
    innings_order: Mapped[int] = Column(Integer, nullable=False)
    position: Mapped[int] = Column(Integer, nullable=False, default=0)
    dismissal_type: Mapped[int] = Column(Integer, nullable=False, default=0)
    dismissal: Mapped[str] = Column(String, nullable=False, default="")
    score: Mapped[int | None] = Column(Integer, nullable=True)
    not_out: Mapped[int] = Column(Integer, nullable=False, default=0)
    balls: Mapped[int | None] = Column(Integer, nullable=True)
    minutes: Mapped[int | None] = Column(Integer, nullable=True)
    fours: Mapped[int] = Column(Integer, nullable=False, default=0)
    sixes: Mapped[int] = Column(Integer, nullable=False, default=0)
    captain: Mapped[int] = Column(Integer, nullable=False, default=0)
    wicket_keeper: Mapped[int] = Column(Integer, nullable=False, default=0)


class BowlingDetail(Base):
    __tablename__ = "bowling_details"
    __table_args__ = (Index("idx_bowling_match_player", "match_id", "player_id"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), nullable=False)
    match_type: Mapped[str] = Column(String(8), nullable=False)
    player_id: Mapped[int] = Column(Integer, ForeignKey("players.id"), nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    opponents_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    innings_number: Mapped[int] = Column(Integer, nullable=False)
    innings_order: Mapped[int] = Column(Integer, nullable=False)
    position: Mapped[int] = Column(Integer, nullable=False, default=0)
    did_bowl: Mapped[int] = Column(Integer, nullable=False, default=1)
    balls: Mapped[int | None] = Column(Integer, nullable=True)
    maidens: Mapped[int | None] = Column(Integer, nullable=True)
    dots: Mapped[int | None] = Column(Integer, nullable=True)
    runs: Mapped[int] = Column(Integer, nullable=False, default=0)
    wickets: Mapped[int] = Column(Integer, nullable=False, default=0)
    wides: Mapped[int | None] = Column(Integer, nullable=True)
    no_balls: Mapped[int | None] = Column(Integer, nullable=True)
    fours: Mapped[int | None] = Column(Integer, nullable=True)
    sixes: Mapped[int | None] = Column(Integer, nullable=True)
    captain: Mapped[int] = Column(Integer, nullable=False, default=0)


class FieldingDetail(Base):
    __tablename__ = "fielding_details"
    __table_args__ = (Index("idx_fielding_match_player", "match_id", "player_id"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), nullable=False)
    match_type: Mapped[str] = Column(String(8), nullable=False)
    player_id: Mapped[int] = Column(Integer, ForeignKey("players.id"), nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    opponents_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    innings_number: Mapped[int] = Column(Integer, nullable=False)
    innings_order: Mapped[int] = Column(Integer, nullable=False)
    caught_fielder: Mapped[int] = Column(Integer, nullable=False, default=0)
    caught_keeper: Mapped[int] = Column(Integer, nullable=False, default=0)
    stumped: Mapped[int] = Column(Integer, nullable=False, default=0)


class Innings(Base):
    """Team totals for one innings."""

    __tablename__ = "innings"
    __table_args__ = (Index("idx_innings_match_team", "match_id", "team_id"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), nullable=False)
    match_type: Mapped[str] = Column(String(8), nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    opponents_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    innings_number: Mapped[int] = Column(Integer, nullable=False)
    innings_order: Mapped[int] = Column(Integer, nullable=False)
    total: Mapped[int] = Column(Integer, nullable=False, default=0)
    wickets: Mapped[int] = Column(Integer, nullable=False, default=0)
    balls: Mapped[int] = Column(Integer, nullable=False, default=0)
    minutes: Mapped[int | None] = Column(Integer, nullable=True)
    declared: Mapped[int] = Column(Integer, nullable=False, default=0)
    complete: Mapped[int] = Column(Integer, nullable=False, default=0)
    extras: Mapped[int] = Column(Integer, nullable=False, default=0)
    byes: Mapped[int] = Column(Integer, nullable=False, default=0)
    leg_byes: Mapped[int] = Column(Integer, nullable=False, default=0)
    wides: Mapped[int] = Column(Integer, nullable=False, default=0)
    no_balls: Mapped[int] = Column(Integer, nullable=False, default=0)
    penalties: Mapped[int] = Column(Integer, nullable=False, default=0)


class Partnership(Base):
    __tablename__ = "partnerships"
    __table_args__ = (Index("idx_partnerships_match", "match_id", "innings_order"),)

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), nullable=False)
    match_type: Mapped[str] = Column(String(8), nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    opponents_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    innings_number: Mapped[int] = Column(Integer, nullable=False)
    innings_order: Mapped[int] = Column(Integer, nullable=False)
    wicket: Mapped[int] = Column(Integer, nullable=False)
    partnership: Mapped[int] = Column(Integer, nullable=False, default=0)
    unbroken: Mapped[int] = Column(Integer, nullable=False, default=0)
    multiple: Mapped[int] = Column(Integer, nullable=False, default=0)
    partial: Mapped[int] = Column(Integer, nullable=False, default=0)
    previous_wicket: Mapped[int] = Column(Integer, nullable=False, default=0)
    previous_score: Mapped[int | None] = Column(Integer, nullable=True)
    current_score: Mapped[int] = Column(Integer, nullable=False, default=0)
    # Two zero-padded 8 character player ids, lower id first
    player_ids: Mapped[str] = Column(String(16), nullable=False)
    player_names: Mapped[str] = Column(String, nullable=False)

    players: Mapped[List["PartnershipPlayer"]] = relationship(
        "PartnershipPlayer", back_populates="partnership", order_by="PartnershipPlayer.id"
    )


class PartnershipPlayer(Base):
    """One row per batter in a partnership, in batting order."""

    __tablename__ = "partnerships_players"

    id: Mapped[int] = Column(Integer, primary_key=True)
    partnership_id: Mapped[int] = Column(Integer, ForeignKey("partnerships.id"), index=True, nullable=False)
    player_id: Mapped[int] = Column(Integer, ForeignKey("players.id"), nullable=False)

    partnership: Mapped[Partnership] = relationship("Partnership", back_populates="players")


class FallOfWicket(Base):
    __tablename__ = "fall_of_wickets"

    id: Mapped[int] = Column(Integer, primary_key=True)
    match_id: Mapped[int] = Column(Integer, ForeignKey("matches.id"), index=True, nullable=False)
    innings_order: Mapped[int] = Column(Integer, nullable=False)
    team_id: Mapped[int] = Column(Integer, ForeignKey("teams.id"), nullable=False)
    wicket: Mapped[int] = Column(Integer, nullable=False)
    score: Mapped[int | None] = Column(Integer, nullable=True)
    player_id: Mapped[int] = Column(Integer, ForeignKey("players.id"), nullable=False)
    overs: Mapped[str] = Column(String(8), nullable=False, default="")
