"""Resolve the set of matches a query qualifies against."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Type

from sqlalchemy import Table, select, true
from sqlalchemy.sql.elements import ColumnElement

from cricstats.core.logging import get_logger
from cricstats.db import models
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.staging import RequestStaging

logger = get_logger(__name__)


def _when(enabled: bool, condition: ColumnElement) -> ColumnElement:
    return condition if enabled else true()


def _bit_test(column, mask: int) -> ColumnElement:
    return _when(mask != 0, column.op("&")(mask) != 0)


@dataclass(frozen=True)
class MatchUniverseResolver:
    criteria: QualificationFilter

    def match_conditions(self) -> List[ColumnElement]:
        """Conditions on the match row itself."""
        criteria = self.criteria
        match = models.Match
        if criteria.has_season:
            period = match.series_date == criteria.season
        elif criteria.date_range is not None:
            period = match.match_start_date.between(criteria.date_range.start, criteria.date_range.end)
        else:
            period = true()
        sub_type = _when(
            bool(criteria.match_sub_type),
            match.id.in_(
                select(models.MatchSubType.match_id).where(
                    models.MatchSubType.match_type == criteria.match_sub_type
                )
            ),
        )
        return [
            match.match_type == criteria.match_type,
            sub_type,
            _when(criteria.ground_id != 0, match.location_id == criteria.ground_id),
            _when(criteria.host_country_id != 0, match.home_country_id == criteria.host_country_id),
            period,
        ]

    def team_conditions(self, detail: Type[models.ExtraMatchDetail] = models.ExtraMatchDetail) -> List[ColumnElement]:
        """Conditions on one team's view of a match.

        ``detail`` may be an alias so the same predicates can be applied to the
        team a row belongs to.
        """
        criteria = self.criteria
        return [
            _when(criteria.team_id != 0, detail.team_id == criteria.team_id),
            _when(criteria.opponents_id != 0, detail.opponents_id == criteria.opponents_id),
            _bit_test(detail.result, criteria.result_mask),
            _bit_test(detail.home_away, criteria.venue_mask),
        ]

    def query(self):
        return (
            select(models.Match.id.label("match_id"))
            .join(models.ExtraMatchDetail, models.ExtraMatchDetail.match_id == models.Match.id)
            .where(*self.match_conditions(), *self.team_conditions())
            .distinct()
        )

    def stage(self, staging: RequestStaging) -> Table:
        table = staging.materialize("matches", self.query())
        logger.info(
            "match_universe_staged",
            table=table.name,
            match_type=self.criteria.match_type,
            team_id=self.criteria.team_id,
            opponents_id=self.criteria.opponents_id,
        )
        return table
