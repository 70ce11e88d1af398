"""Partnership records service."""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from cricstats.services.records.aggregator import int_columns
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import Dimension, dimension_key
from cricstats.services.records.extractor import DetailExtractor
from cricstats.services.records.paginator import PagedResult
from cricstats.services.records.partnerships import PartnershipWindowAnalyzer
from cricstats.services.records.sort_order import PARTNERSHIP_INNINGS_SORTS, PARTNERSHIP_SUMMARY_SORTS
from cricstats.services.records_service import RecordsService, select_columns, summary_tie_breakers

INNINGS_COLUMNS = [
    "partnership_id", "match_id", "match_type", "innings_order", "wicket", "runs", "unbroken",
    "partial", "previous_wicket", "previous_score", "current_score", "player1_id", "player1_name",
    "player2_id", "player2_name", "player_names", "team", "opponents", "ground", "match_date",
    "match_title", "result_string",
]

INNINGS_TIE_BREAKERS = ("match_id", "innings_order", "wicket", "partnership_id")


@dataclass
class PartnershipService(RecordsService):
    def summary(self, criteria: QualificationFilter, dimension: Dimension) -> PagedResult:
        key = dimension_key(dimension)
        analyzer = PartnershipWindowAnalyzer()

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = analyzer.aggregate(
                extractor.partnerships(),
                key,
                threshold=criteria.minimum_threshold,
                opponents_id=criteria.opponents_id,
            )
            return int_columns(frame, ("runs", "innings", "not_outs", "completed", "highest"))

        return self.run(
            criteria,
            PARTNERSHIP_SUMMARY_SORTS,
            summary_tie_breakers(key, entity=("player_ids",)),
            build,
        )

    def innings_by_innings(self, criteria: QualificationFilter) -> PagedResult:
        analyzer = PartnershipWindowAnalyzer()

        def build(extractor: DetailExtractor) -> pd.DataFrame:
            frame = analyzer.innings_by_innings(extractor.partnerships(), criteria.minimum_threshold)
            frame = select_columns(frame, INNINGS_COLUMNS).copy()
            return int_columns(frame, ("runs", "previous_score", "current_score", "player2_id"))

        return self.run(criteria, PARTNERSHIP_INNINGS_SORTS, INNINGS_TIE_BREAKERS, build)
