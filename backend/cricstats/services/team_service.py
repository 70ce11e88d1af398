"""Team service layer."""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from cricstats.db.models import VictoryType
from cricstats.services.records.aggregator import int_columns
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension, dimension_key
from cricstats.services.records.extractor import DetailExtractor
from cricstats.services.records.paginator import PagedResult
from cricstats.services.records.sort_order import (
    TARGET_SORTS,
    TEAM_EXTRAS_INNINGS_SORTS,
    TEAM_EXTRAS_SORTS,
    TEAM_INNINGS_SORTS,
    TEAM_SUMMARY_SORTS,
)
from cricstats.services.records.teams import (
    EXTRAS_COLUMNS,
    TeamAggregator,
    extras_innings_rows,
    highest_targets_chased,
    lowest_targets_defended,
    team_innings_rows,
)
from cricstats.services.records_service import RecordsService, select_columns

ROW_CONTEXT = [
    "innings_id", "match_id", "match_type", "team_id", "opponents_id", "team", "opponents", "ground",
    "match_date", "innings_number", "innings_order",
]

INNINGS_COLUMNS = [
    *ROW_CONTEXT, "total", "wickets", "balls", "overs", "rpo", "minutes", "declared", "complete", "result",
]

EXTRAS_INNINGS_COLUMNS = [*ROW_CONTEXT, "runs", *EXTRAS_COLUMNS, "balls", "wickets", "percentage"]

TARGET_COLUMNS = [
    "match_id", "match_type", "target", "total", "how_much", "winning_team_id", "winning_team",
    "losing_team", "ground", "match_date", "series_date", "match_title", "result_string",
]

ROW_TIE_BREAKERS = ("match_id", "innings_order", "team_id")


@dataclass
class TeamService(RecordsService):
    def _aggregator(self, criteria: QualificationFilter, dimension: Dimension) -> TeamAggregator:
        return TeamAggregator(dimension_key(dimension), opponents_id=criteria.opponents_id)

    def summary(self, criteria: QualificationFilter, dimension: Dimension, team_batting: bool = True) -> PagedResult:
        """Team records per dimension; ``team_batting=False`` reports what teams conceded."""
        aggregator = self._aggregator(criteria, dimension)

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = aggregator.summary(extractor.team_innings(team_batting), criteria.minimum_threshold)
            return int_columns(frame, ("total_runs", "wickets", "total_balls", "hs", "ls", "innings"))

        return self.run(criteria, TEAM_SUMMARY_SORTS, aggregator.aggregator.partition, build)

    def innings_by_innings(self, criteria: QualificationFilter, team_batting: bool = True) -> PagedResult:
        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = team_innings_rows(extractor.team_innings(team_batting), criteria.minimum_threshold)
            return int_columns(select_columns(frame, INNINGS_COLUMNS).copy(), ("total", "wickets", "balls", "minutes"))

        return self.run(criteria, TEAM_INNINGS_SORTS, ROW_TIE_BREAKERS, build)

    def extras(self, criteria: QualificationFilter, dimension: Dimension = Dimension.CAREER) -> PagedResult:
        aggregator = self._aggregator(criteria, dimension)

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = aggregator.extras(extractor.team_innings(), criteria.minimum_threshold)
            return int_columns(frame, ("runs", *EXTRAS_COLUMNS, "balls", "wickets"))

        return self.run(criteria, TEAM_EXTRAS_SORTS, aggregator.aggregator.partition, build)

    def extras_innings_by_innings(self, criteria: QualificationFilter) -> PagedResult:
        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = extras_innings_rows(extractor.team_innings(), criteria.minimum_threshold)
            frame = select_columns(frame, EXTRAS_INNINGS_COLUMNS).copy()
            return int_columns(frame, ("runs", *EXTRAS_COLUMNS, "balls", "wickets"))

        return self.run(criteria, TEAM_EXTRAS_INNINGS_SORTS, ROW_TIE_BREAKERS, build)

    def lowest_targets_defended(self, criteria: QualificationFilter) -> PagedResult:
        def build(extractor: DetailExtractor) -> pd.DataFrame:
            innings = extractor.target_innings(VictoryType.RUNS, first_innings_only=False)
            frame = lowest_targets_defended(innings, criteria.minimum_threshold)
            return int_columns(select_columns(frame, TARGET_COLUMNS).copy(), ("target", "total", "how_much"))

        return self.run(criteria, TARGET_SORTS, ("match_id",), build)

    def highest_targets_chased(self, criteria: QualificationFilter) -> PagedResult:
        def build(extractor: DetailExtractor) -> pd.DataFrame:
            innings = extractor.target_innings(VictoryType.WICKETS, first_innings_only=True)
            frame = highest_targets_chased(innings, criteria.minimum_threshold)
            return int_columns(select_columns(frame, TARGET_COLUMNS).copy(), ("target", "total", "how_much"))

        return self.run(criteria, TARGET_SORTS, ("match_id",), build)
