"""Team summaries, extras records and target records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pandas as pd

from cricstats.core.logging import get_logger
from cricstats.db.models import MatchResult
from cricstats.services.records import formulas
from cricstats.services.records.aggregator import (
    AggregationPlan,
    DimensionAggregator,
    apply_threshold,
    numeric,
)
from cricstats.services.records.dimensions import Dimension, DimensionKey

logger = get_logger(__name__)

# Victory types whose matches carry no team result (abandoned, unknown, 13)
EXCLUDED_VICTORY_TYPES = (6, 11, 13)

TEAM_NUMERIC = (
    "total", "wickets", "balls", "minutes", "declared", "complete", "extras", "byes", "leg_byes",
    "wides", "no_balls", "penalties", "result", "victory_type", "innings_number", "innings_order",
    "balls_per_over",
)

EXTRAS_COLUMNS = ("extras", "byes", "leg_byes", "wides", "no_balls", "penalties")


def _result_count(results: pd.Series, flag: MatchResult) -> pd.Series:
    return ((results.fillna(0).astype(int) & int(flag)) != 0).astype(int)


def _prepare_team(innings: pd.DataFrame) -> pd.DataFrame:
    frame = numeric(innings, TEAM_NUMERIC)
    complete = frame["complete"].fillna(0).astype(bool)
    return frame.assign(
        innings=1,
        total_runs=frame["total"].fillna(0),
        total_balls=frame["balls"].fillna(0),
        wickets=frame["wickets"].fillna(0),
        _completed_total=frame["total"].where(complete),
    )


def _derive_team(grouped: pd.DataFrame, prepared: pd.DataFrame, partition: List[str]) -> pd.DataFrame:
    # Results count once per match, not once per innings
    matches = prepared.drop_duplicates([*partition, "match_id"])
    results = matches.assign(
        played=1,
        won=_result_count(matches["result"], MatchResult.WON),
        lost=_result_count(matches["result"], MatchResult.LOST),
        drawn=_result_count(matches["result"], MatchResult.DRAWN),
        tied=_result_count(matches["result"], MatchResult.TIED),
    )
    results = results.groupby(partition, dropna=False)[["played", "won", "lost", "drawn", "tied"]].sum().reset_index()
    grouped = grouped.merge(results, on=partition, how="left")

    totals = prepared.groupby(partition, dropna=False).agg(
        hs=("total", "max"),
        ls=("_completed_total", "min"),
    ).reset_index()
    grouped = grouped.merge(totals, on=partition, how="left")

    grouped["avg"] = formulas.team_average(grouped["total_runs"], grouped["wickets"])
    grouped["rpo"] = formulas.run_rate(grouped["total_runs"], grouped["total_balls"])
    grouped["sr"] = formulas.team_strike_rate(grouped["total_runs"], grouped["total_balls"])
    return grouped


TEAM_PLAN = AggregationPlan(
    name="teams",
    prepare=_prepare_team,
    sums=("innings", "total_runs", "wickets", "total_balls"),
    derive=_derive_team,
    headline="total_runs",
)


def _prepare_extras(innings: pd.DataFrame) -> pd.DataFrame:
    frame = numeric(innings, TEAM_NUMERIC)
    frame[list(EXTRAS_COLUMNS)] = frame[list(EXTRAS_COLUMNS)].fillna(0)
    return frame.assign(
        runs=frame["total"].fillna(0),
        balls=frame["balls"].fillna(0),
        wickets=frame["wickets"].fillna(0),
    )


def _derive_extras(grouped: pd.DataFrame, prepared: pd.DataFrame, partition: List[str]) -> pd.DataFrame:
    played = (
        prepared.groupby(partition, dropna=False)["match_id"].nunique().rename("played").reset_index()
    )
    grouped = grouped.merge(played, on=partition, how="left")
    grouped["percentage"] = formulas.extras_percentage(grouped["extras"], grouped["runs"])
    return grouped


EXTRAS_PLAN = AggregationPlan(
    name="extras",
    prepare=_prepare_extras,
    sums=("runs", *EXTRAS_COLUMNS, "balls", "wickets"),
    derive=_derive_extras,
    headline="extras",
)


@dataclass(frozen=True)
class TeamAggregator:
    """Team records for one dimension.

    Opponents join the grouping when a specific opponent was requested, so a
    team's record against that side is reported separately.
    """

    key: DimensionKey
    opponents_id: int = 0

    @property
    def aggregator(self) -> DimensionAggregator:
        if self.opponents_id and self.key.dimension != Dimension.OPPONENT:
            return DimensionAggregator(self.key, entity=("team_id", "opponents_id"), carry=("team", "opponents"))
        return DimensionAggregator(self.key, entity=("team_id",), carry=("team",))

    @staticmethod
    def _with_results(innings: pd.DataFrame) -> pd.DataFrame:
        if innings.empty:
            return innings
        victory_type = pd.to_numeric(innings["victory_type"], errors="coerce")
        return innings[~victory_type.isin(EXCLUDED_VICTORY_TYPES)]

    def summary(self, innings: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
        return self.aggregator.aggregate(
            TEAM_PLAN,
            self._with_results(innings),
            threshold=threshold,
            opponents_id=self.opponents_id,
        )

    def extras(self, innings: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
        return self.aggregator.aggregate(
            EXTRAS_PLAN,
            innings,
            threshold=threshold,
            opponents_id=self.opponents_id,
        )


def team_innings_rows(innings: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    if innings.empty:
        return innings
    frame = numeric(innings, TEAM_NUMERIC)
    frame["rpo"] = formulas.run_rate(frame["total"], frame["balls"])
    frame["overs"] = formulas.overs_from_balls(frame["balls"], frame["balls_per_over"].fillna(6))
    frame["declared"] = frame["declared"].fillna(0).astype(bool)
    frame["complete"] = frame["complete"].fillna(0).astype(bool)
    return apply_threshold(frame, "total", threshold)


def extras_innings_rows(innings: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
    if innings.empty:
        return innings
    frame = _prepare_extras(innings)
    frame["percentage"] = formulas.extras_percentage(frame["extras"], frame["runs"])
    return apply_threshold(frame, "extras", threshold)


def lowest_targets_defended(innings: pd.DataFrame, limit: int = 0) -> pd.DataFrame:
    """Targets set by the eventual winners of matches won by runs.

    The target is the losing side's final-innings total plus the margin; a
    non-zero ``limit`` keeps targets at or below it.
    """
    if innings.empty:
        return innings
    frame = numeric(innings, ("total", "how_much", "innings_order"))
    final = frame.sort_values(["match_id", "innings_order"], kind="mergesort").groupby("match_id").tail(1)
    final = final.assign(target=final["total"].fillna(0) + final["how_much"].fillna(0))
    if limit:
        final = final[final["target"] <= limit]
    logger.info("targets_selected", kind="lowest_defended", rows=len(final))
    return final


def highest_targets_chased(innings: pd.DataFrame, limit: int = 0) -> pd.DataFrame:
    """Targets reached in matches won by wickets: the first-innings total plus one."""
    if innings.empty:
        return innings
    frame = numeric(innings, ("total", "how_much", "innings_order"))
    first = frame.drop_duplicates("match_id")
    first = first.assign(target=first["total"].fillna(0) + 1)
    first = apply_threshold(first, "target", limit)
    logger.info("targets_selected", kind="highest_chased", rows=len(first))
    return first
