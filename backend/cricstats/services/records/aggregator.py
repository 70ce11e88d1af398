"""Group detail rows by entity and dimension and derive the summary statistics.

One aggregator serves batting, bowling and fielding; what differs per category
lives in an :class:`AggregationPlan`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from cricstats.core.config import settings
from cricstats.core.logging import get_logger
from cricstats.services.records import formulas
from cricstats.services.records.best_performance import BOWLING_BEST, FIELDING_BEST
from cricstats.services.records.dimensions import LABEL_COLUMNS, Dimension, DimensionKey
from cricstats.services.records.extractor import combine_match_innings

logger = get_logger(__name__)

Derivation = Callable[[pd.DataFrame, pd.DataFrame, List[str]], pd.DataFrame]


def numeric(frame: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Coerce columns read back from staging to numbers; all-null columns come back as objects."""
    frame = frame.copy()
    for column in columns:
        if column in frame.columns:
            frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame


def apply_threshold(frame: pd.DataFrame, column: str, threshold: int) -> pd.DataFrame:
    if not threshold:
        return frame
    return frame[frame[column] >= threshold]


@dataclass(frozen=True)
class AggregationPlan:
    name: str
    prepare: Callable[[pd.DataFrame], pd.DataFrame]
    sums: Sequence[str]
    derive: Derivation
    headline: str


@dataclass(frozen=True)
class DimensionAggregator:
    """Aggregate per (entity, match type, dimension value).

    ``entity`` names the columns identifying who the row is about: the player
    for individual records, the pair for partnerships, the team for team
    records.
    """

    key: DimensionKey
    entity: Sequence[str] = ("player_id",)
    carry: Sequence[str] = ("name", "sort_name_part")

    @property
    def partition(self) -> List[str]:
        return [*self.entity, "match_type", *self.key.key_columns]

    def group(self, frame: pd.DataFrame, sums: Sequence[str]) -> pd.DataFrame:
        return frame.groupby(self.partition, dropna=False)[list(sums)].sum().reset_index()

    def attach_labels(self, grouped: pd.DataFrame, details: pd.DataFrame) -> pd.DataFrame:
        """Add the display columns for the partition, then every other label as None."""
        carried = [
            column
            for column in (*self.carry, *self.key.label_columns)
            if column in details.columns and column not in grouped.columns
        ]
        if carried:
            labels = details.groupby(self.partition, dropna=False)[carried].first().reset_index()
            grouped = grouped.merge(labels, on=self.partition, how="left")
        for column in LABEL_COLUMNS:
            if column not in grouped.columns:
                grouped[column] = None
        return grouped

    def label_opponents(self, grouped: pd.DataFrame, details: pd.DataFrame, opponents_id: int) -> pd.DataFrame:
        # Details restricted to one opponent carry that team's name whatever the dimension
        if opponents_id and self.key.dimension != Dimension.OPPONENT and not details.empty:
            grouped["opponents"] = details["opponents"].iloc[0]
        return grouped

    def aggregate(
        self,
        plan: AggregationPlan,
        details: pd.DataFrame,
        appearances: Optional[pd.DataFrame] = None,
        threshold: int = 0,
        opponents_id: int = 0,
    ) -> pd.DataFrame:
        if details.empty:
            return pd.DataFrame(columns=[*self.partition, *LABEL_COLUMNS, plan.headline])
        prepared = plan.prepare(details)
        grouped = self.group(prepared, plan.sums)
        grouped = plan.derive(grouped, prepared, self.partition)
        grouped = self.attach_labels(grouped, prepared)
        grouped = self.label_opponents(grouped, prepared, opponents_id)
        if appearances is not None:
            grouped = grouped.merge(appearances, on=[*self.entity, *self.key.key_columns], how="left")
        result = apply_threshold(grouped, plan.headline, threshold)
        logger.info(
            "records_aggregated",
            category=plan.name,
            dimension=self.key.dimension.value,
            details=len(details),
            rows=len(result),
        )
        return result


def _merge_best(grouped: pd.DataFrame, best: pd.DataFrame, partition: List[str], columns: dict) -> pd.DataFrame:
    best = best[partition + list(columns)].rename(columns=columns)
    return grouped.merge(best, on=partition, how="left")


# Batting

BATTING_NUMERIC = ("dismissal_type", "score", "not_out", "balls", "minutes", "fours", "sixes", "innings_number")


def prepare_batting(details: pd.DataFrame) -> pd.DataFrame:
    frame = numeric(details, BATTING_NUMERIC)
    counted = ~frame["dismissal_type"].isin(formulas.NON_INNINGS_DISMISSAL_TYPES)
    not_out = frame["not_out"].fillna(0).astype(bool)
    score = frame["score"]
    return frame.assign(
        innings=counted.astype(int),
        not_outs=(counted & not_out).astype(int),
        runs=score.fillna(0),
        hundreds=(counted & (score >= 100)).astype(int),
        fifties=(counted & (score >= 50) & (score < 100)).astype(int),
        ducks=(counted & (score == 0) & ~not_out).astype(int),
        _entries=1,
        _excluded=frame["dismissal_type"].isin(formulas.EXCLUDED_BALL_DISMISSAL_TYPES).astype(int),
        _balls_recorded=frame["balls"].notna().astype(int),
        _balls_sum=frame["balls"].fillna(0),
        _highest=formulas.flag_encode(score.where(counted), not_out),
    )


def derive_batting(grouped: pd.DataFrame, prepared: pd.DataFrame, partition: List[str]) -> pd.DataFrame:
    highest = (
        prepared.groupby(partition, dropna=False)["_highest"].max().rename("_highest_score").reset_index()
    )
    grouped = grouped.merge(highest, on=partition, how="left")
    grouped["balls"] = formulas.computed_balls(
        grouped["_balls_sum"], grouped["_balls_recorded"], grouped["_entries"], grouped["_excluded"]
    )
    grouped["avg"] = formulas.batting_average(grouped["runs"], grouped["innings"], grouped["not_outs"])
    grouped["sr"] = formulas.batting_strike_rate(grouped["runs"], grouped["balls"])
    grouped["bi"] = formulas.batting_index(grouped["avg"], grouped["sr"])
    score, not_out = formulas.flag_decode(grouped["_highest_score"])
    grouped["highest_score"] = score
    grouped["highest_score_not_out"] = not_out
    return grouped


BATTING_PLAN = AggregationPlan(
    name="batting",
    prepare=prepare_batting,
    sums=(
        "innings", "not_outs", "runs", "hundreds", "fifties", "ducks", "fours", "sixes",
        "_entries", "_excluded", "_balls_recorded", "_balls_sum",
    ),
    derive=derive_batting,
    headline="runs",
)


# Bowling

BOWLING_NUMERIC = (
    "did_bowl", "balls", "maidens", "dots", "runs", "wickets", "wides", "no_balls", "fours", "sixes",
    "innings_number", "innings_order",
)


def prepare_bowling(details: pd.DataFrame, five_wicket_limit: Optional[int] = None) -> pd.DataFrame:
    limit = settings.FIVE_WICKET_LIMIT if five_wicket_limit is None else five_wicket_limit
    frame = numeric(details, BOWLING_NUMERIC)
    frame[["runs", "wickets"]] = frame[["runs", "wickets"]].fillna(0)
    return frame.assign(
        innings=frame["did_bowl"].fillna(0).astype(bool).astype(int),
        five_for=(frame["wickets"] >= limit).astype(int),
    )


def derive_bowling(grouped: pd.DataFrame, prepared: pd.DataFrame, partition: List[str]) -> pd.DataFrame:
    grouped = grouped[grouped["innings"] > 0].copy()
    bowled = prepared[prepared["innings"] > 0]

    grouped["avg"] = formulas.bowling_average(grouped["runs"], grouped["wickets"])
    grouped["rpo"] = formulas.economy_rate(grouped["runs"], grouped["balls"])
    grouped["sr"] = formulas.bowling_strike_rate(grouped["balls"], grouped["wickets"])
    grouped["bi"] = formulas.bowling_index(grouped["runs"], grouped["balls"], grouped["wickets"])

    best_innings = BOWLING_BEST.select(bowled, partition)
    grouped = _merge_best(grouped, best_innings, partition, {"wickets": "bbi_wickets", "runs": "bbi_runs"})
    grouped["_bbi"] = formulas.synthetic_best_bowling(grouped["bbi_wickets"], grouped["bbi_runs"])

    per_match = combine_match_innings(bowled, [*partition, "match_id"], ["wickets", "runs"])
    best_match = BOWLING_BEST.select(per_match, partition)
    grouped = _merge_best(grouped, best_match, partition, {"wickets": "bbm_wickets", "runs": "bbm_runs"})
    grouped["_bbm"] = formulas.synthetic_best_bowling(grouped["bbm_wickets"], grouped["bbm_runs"])

    ten_for = (
        per_match.assign(ten_for=(per_match["wickets"] >= 10).astype(int))
        .groupby(partition, dropna=False)["ten_for"]
        .sum()
        .reset_index()
    )
    grouped = grouped.merge(ten_for, on=partition, how="left")
    grouped["ten_for"] = grouped["ten_for"].fillna(0).astype(int)
    return grouped


def bowling_plan(five_wicket_limit: Optional[int] = None) -> AggregationPlan:
    return AggregationPlan(
        name="bowling",
        prepare=lambda details: prepare_bowling(details, five_wicket_limit),
        sums=(
            "innings", "balls", "maidens", "dots", "runs", "wickets", "fours", "sixes", "wides",
            "no_balls", "five_for",
        ),
        derive=derive_bowling,
        headline="wickets",
    )


# Fielding

FIELDING_NUMERIC = ("caught_fielder", "caught_keeper", "stumped", "innings_number", "innings_order")


def prepare_fielding(details: pd.DataFrame) -> pd.DataFrame:
    frame = numeric(details, FIELDING_NUMERIC)
    frame[["caught_fielder", "caught_keeper", "stumped"]] = (
        frame[["caught_fielder", "caught_keeper", "stumped"]].fillna(0)
    )
    return frame.assign(
        innings=1,
        dismissals=formulas.fielding_dismissals(frame["caught_fielder"], frame["caught_keeper"], frame["stumped"]),
        caught=frame["caught_fielder"] + frame["caught_keeper"],
        wicket_keeper_dismissals=formulas.wicket_keeper_dismissals(frame["caught_keeper"], frame["stumped"]),
    )


def derive_fielding(grouped: pd.DataFrame, prepared: pd.DataFrame, partition: List[str]) -> pd.DataFrame:
    best = FIELDING_BEST.select(prepared, partition)
    return _merge_best(
        grouped,
        best,
        partition,
        {
            "dismissals": "best_dismissals",
            "caught_keeper": "best_caught_keeper",
            "caught_fielder": "best_caught_fielder",
            "stumped": "best_stumpings",
        },
    )


FIELDING_PLAN = AggregationPlan(
    name="fielding",
    prepare=prepare_fielding,
    sums=(
        "innings", "caught_fielder", "caught_keeper", "stumped", "dismissals", "caught",
        "wicket_keeper_dismissals",
    ),
    derive=derive_fielding,
    headline="dismissals",
)


def int_columns(frame: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Present whole-number statistics as nullable integers."""
    for column in columns:
        if column in frame.columns:
            frame[column] = np.trunc(pd.to_numeric(frame[column], errors="coerce")).astype("Int64")
    return frame
