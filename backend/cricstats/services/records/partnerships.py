"""Pair partnership batters and aggregate partnership records."""
from __future__ import annotations

from typing import List

import pandas as pd

from cricstats.core.logging import get_logger
from cricstats.services.records import formulas
from cricstats.services.records.aggregator import AggregationPlan, DimensionAggregator, numeric
from cricstats.services.records.best_performance import PARTNERSHIP_BEST
from cricstats.services.records.dimensions import DimensionKey

logger = get_logger(__name__)

# A partnership is identified by where it happened and who took part
PAIR_PARTITION = ["match_id", "innings_order", "wicket", "team_id", "opponents_id", "player_ids"]

PARTNERSHIP_NUMERIC = (
    "runs", "unbroken", "partial", "wicket", "previous_wicket", "previous_score", "current_score",
    "innings_number", "innings_order", "batting_order",
)


class PartnershipWindowAnalyzer:
    """Turn one-row-per-batter partnership extracts into one row per partnership."""

    def pair(self, rows: pd.DataFrame) -> pd.DataFrame:
        """Keep the first batter of each partnership and look ahead one row for the second."""
        if rows.empty:
            return rows.assign(player1_id=[], player1_name=[], player2_id=[], player2_name=[])
        frame = numeric(rows, PARTNERSHIP_NUMERIC)
        ordered = frame.sort_values([*PAIR_PARTITION, "batting_order"], kind="mergesort")
        window = ordered.groupby(PAIR_PARTITION, dropna=False, sort=False)
        ordered = ordered.assign(
            player2_id=window["player_id"].shift(-1),
            player2_name=window["player_name"].shift(-1),
            _position=window.cumcount(),
        )
        paired = ordered[ordered["_position"] == 0].drop(columns="_position")
        paired = paired.rename(columns={"player_id": "player1_id", "player_name": "player1_name"})
        paired["unbroken"] = paired["unbroken"].fillna(0).astype(bool)
        paired["_synthetic"] = formulas.flag_encode(paired["runs"], paired["unbroken"])
        logger.debug("partnerships_paired", rows=len(rows), partnerships=len(paired))
        return paired

    def innings_by_innings(self, rows: pd.DataFrame, threshold: int = 0) -> pd.DataFrame:
        paired = self.pair(rows)
        if threshold and not paired.empty:
            paired = paired[paired["runs"] >= threshold]
        return paired

    def aggregate(self, rows: pd.DataFrame, key: DimensionKey, threshold: int = 0, opponents_id: int = 0) -> pd.DataFrame:
        aggregator = DimensionAggregator(key, entity=("player_ids",), carry=("player_names", "team"))
        paired = self.pair(rows)
        grouped = aggregator.aggregate(PARTNERSHIP_PLAN, paired, threshold=threshold, opponents_id=opponents_id)
        return name_pair_members(grouped, paired)


def name_pair_members(grouped: pd.DataFrame, paired: pd.DataFrame) -> pd.DataFrame:
    """Split ``player_ids`` into the two batters, lower id first, and name each of them."""
    if grouped.empty:
        return grouped.assign(player1_id=[], player1_name=[], player2_id=[], player2_name=[])
    columns = ["player_id", "player_name"]
    names = pd.concat(
        [
            paired[["player1_id", "player1_name"]].set_axis(columns, axis=1),
            paired[["player2_id", "player2_name"]].set_axis(columns, axis=1),
        ]
    ).dropna(subset=["player_id"])
    names = names.drop_duplicates("player_id")
    lookup = names.set_index(names["player_id"].astype(int))["player_name"]
    # player_ids holds both ids as zero-padded eight digit numbers, smaller first
    ids = grouped["player_ids"].astype(str)
    first = ids.str[:8].astype(int)
    second = ids.str[8:16].astype(int)
    return grouped.assign(
        player1_id=first,
        player1_name=first.map(lookup),
        player2_id=second,
        player2_name=second.map(lookup),
    )


def _prepare_partnerships(paired: pd.DataFrame) -> pd.DataFrame:
    runs = paired["runs"]
    return paired.assign(
        innings=1,
        not_outs=paired["unbroken"].astype(int),
        hundreds=(runs >= 100).astype(int),
        fifties=((runs >= 50) & (runs < 100)).astype(int),
    )


def _derive_partnerships(grouped: pd.DataFrame, prepared: pd.DataFrame, partition: List[str]) -> pd.DataFrame:
    grouped["completed"] = formulas.completed_innings(grouped["innings"], grouped["not_outs"])
    grouped["avg"] = formulas.partnership_average(grouped["runs"], grouped["innings"], grouped["not_outs"])
    best = PARTNERSHIP_BEST.select(prepared, partition)[[*partition, "_synthetic"]]
    grouped = grouped.merge(best.rename(columns={"_synthetic": "_highest"}), on=partition, how="left")
    highest, unbroken = formulas.flag_decode(grouped["_highest"])
    grouped["highest"] = highest
    grouped["highest_unbroken"] = unbroken
    return grouped


PARTNERSHIP_PLAN = AggregationPlan(
    name="partnerships",
    prepare=_prepare_partnerships,
    sums=("runs", "innings", "not_outs", "hundreds", "fifties"),
    derive=_derive_partnerships,
    headline="runs",
)
