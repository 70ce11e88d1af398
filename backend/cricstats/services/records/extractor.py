"""Extract per-performance detail rows for the qualifying matches.

Every extract is materialized into a request-scoped staging table first and
read back as a DataFrame. Rows carry every dimension column (ground, host
country, season, series, start year, opponents) plus display names, so one
extract serves every dimension.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd
from sqlalchemy import Table, and_, distinct, func, select
from sqlalchemy.orm import aliased
from sqlalchemy.sql import Select

from cricstats.core.logging import get_logger
from cricstats.db import models
from cricstats.services.records.criteria import QualificationFilter
from cricstats.services.records.dimensions import DimensionKey
from cricstats.services.records.match_universe import MatchUniverseResolver
from cricstats.services.records.staging import RequestStaging

logger = get_logger(__name__)


def combine_match_innings(
    frame: pd.DataFrame,
    keys: Sequence[str],
    values: Sequence[str],
    carry: Sequence[str] = (),
) -> pd.DataFrame:
    """Add each player's first- and second-innings figures within a match.

    The result keeps ``<value>_1`` and ``<value>_2`` alongside the combined
    ``<value>``; a missing innings contributes zero to the combined figure.
    """
    keys = list(keys)
    values = list(values)
    first = frame.loc[frame["innings_number"] == 1, keys + values]
    second = frame.loc[frame["innings_number"] != 1, keys + values]
    combined = first.merge(second, on=keys, how="outer", suffixes=("_1", "_2"))
    for column in values:
        combined[column] = combined[f"{column}_1"].fillna(0) + combined[f"{column}_2"].fillna(0)
    if carry:
        labels = frame.groupby(keys, dropna=False)[list(carry)].first().reset_index()
        combined = combined.merge(labels, on=keys, how="left")
    return combined


class DetailExtractor:
    def __init__(self, db, staging: RequestStaging, criteria: QualificationFilter) -> None:
        self.db = db
        self.staging = staging
        self.criteria = criteria
        self.resolver = MatchUniverseResolver(criteria)
        self._matches: Optional[Table] = None

    @property
    def matches(self) -> Table:
        if self._matches is None:
            self._matches = self.resolver.stage(self.staging)
        return self._matches

    def _contextualize(
        self,
        stmt: Select,
        match_id,
        team_id,
        opponents_id,
        player_id=None,
    ) -> Select:
        """Restrict ``stmt`` to qualifying matches and attach match context.

        The row's own team must satisfy the team/opponent/result/venue
        criteria, and the team-total pseudo player is excluded.
        """
        match = models.Match
        detail = aliased(models.ExtraMatchDetail, name="team_detail")
        team = aliased(models.Team, name="team_names")
        opponents = aliased(models.Team, name="opponents_names")
        stmt = stmt.add_columns(
            match.location_id.label("ground_id"),
            match.home_country_id.label("home_country_id"),
            match.series_date.label("series_date"),
            match.series_number.label("series_number"),
            match.match_start_year.label("match_start_year"),
            match.match_start_date.label("match_date"),
            match.balls_per_over.label("balls_per_over"),
            team.name.label("team"),
            opponents.name.label("opponents"),
            models.Ground.known_as.label("ground"),
            models.Country.name.label("country_name"),
        )
        stmt = (
            stmt.join(self.matches, self.matches.c.match_id == match_id)
            .join(match, match.id == match_id)
            .join(detail, and_(detail.match_id == match_id, detail.team_id == team_id))
            .join(team, team.id == team_id)
            .join(opponents, opponents.id == opponents_id)
            .join(models.Ground, models.Ground.id == match.location_id)
            .outerjoin(models.Country, models.Country.id == match.home_country_id)
            .where(*self.resolver.team_conditions(detail))
        )
        if player_id is not None:
            stmt = stmt.add_columns(
                models.Player.full_name.label("name"),
                models.Player.sort_name_part.label("sort_name_part"),
            ).join(models.Player, models.Player.id == player_id).where(
                player_id != models.TEAM_TOTAL_PLAYER_ID
            )
        return stmt

    def _extract(self, purpose: str, stmt: Select) -> pd.DataFrame:
        table = self.staging.materialize(purpose, stmt)
        frame = self.staging.read(table)
        logger.info("details_extracted", purpose=purpose, rows=len(frame))
        return frame

    def batting(self) -> pd.DataFrame:
        bd = models.BattingDetail
        stmt = select(
            bd.id.label("detail_id"),
            bd.match_id,
            bd.match_type,
            bd.player_id,
            bd.team_id,
            bd.opponents_id,
            bd.innings_number,
            bd.innings_order,
            bd.position,
            bd.dismissal_type,
            bd.score,
            bd.not_out,
            bd.balls,
            bd.minutes,
            bd.fours,
            bd.sixes,
        ).select_from(bd)
        stmt = self._contextualize(stmt, bd.match_id, bd.team_id, bd.opponents_id, bd.player_id)
        return self._extract("batting", stmt)

    def bowling(self) -> pd.DataFrame:
        bw = models.BowlingDetail
        stmt = select(
            bw.id.label("detail_id"),
            bw.match_id,
            bw.match_type,
            bw.player_id,
            bw.team_id,
            bw.opponents_id,
            bw.innings_number,
            bw.innings_order,
            bw.did_bowl,
            bw.balls,
            bw.maidens,
            bw.dots,
            bw.runs,
            bw.wickets,
            bw.wides,
            bw.no_balls,
            bw.fours,
            bw.sixes,
        ).select_from(bw)
        stmt = self._contextualize(stmt, bw.match_id, bw.team_id, bw.opponents_id, bw.player_id)
        return self._extract("bowling", stmt)

    def fielding(self) -> pd.DataFrame:
        fd = models.FieldingDetail
        stmt = select(
            fd.id.label("detail_id"),
            fd.match_id,
            fd.match_type,
            fd.player_id,
            fd.team_id,
            fd.opponents_id,
            fd.innings_number,
            fd.innings_order,
            fd.caught_fielder,
            fd.caught_keeper,
            fd.stumped,
        ).select_from(fd)
        stmt = self._contextualize(stmt, fd.match_id, fd.team_id, fd.opponents_id, fd.player_id)
        return self._extract("fielding", stmt)

    def partnerships(self) -> pd.DataFrame:
        """One row per batter per partnership, ordered rows keep batting order."""
        ps = models.Partnership
        pp = models.PartnershipPlayer
        match = models.Match
        stmt = (
            select(
                ps.id.label("partnership_id"),
                pp.id.label("batting_order"),
                ps.match_id,
                ps.match_type,
                ps.team_id,
                ps.opponents_id,
                ps.innings_number,
                ps.innings_order,
                ps.wicket,
                ps.partnership.label("runs"),
                ps.unbroken,
                ps.partial,
                ps.previous_wicket,
                ps.previous_score,
                ps.current_score,
                ps.player_ids,
                ps.player_names,
                pp.player_id,
                models.Player.full_name.label("player_name"),
                match.match_title,
                match.result_string,
            )
            .select_from(ps)
            .join(pp, pp.partnership_id == ps.id)
            .join(models.Player, models.Player.id == pp.player_id)
            .where(ps.multiple == 0)
        )
        stmt = self._contextualize(stmt, ps.match_id, ps.team_id, ps.opponents_id)
        return self._extract("partnerships", stmt)

    def team_innings(self, team_batting: bool = True) -> pd.DataFrame:
        """Team innings totals seen from the batting side, or the fielding side."""
        inn = models.Innings
        side = inn.team_id if team_batting else inn.opponents_id
        other = inn.opponents_id if team_batting else inn.team_id
        stmt = select(
            inn.id.label("innings_id"),
            inn.match_id,
            inn.match_type,
            side.label("team_id"),
            other.label("opponents_id"),
            inn.innings_number,
            inn.innings_order,
            inn.total,
            inn.wickets,
            inn.balls,
            inn.minutes,
            inn.declared,
            inn.complete,
            inn.extras,
            inn.byes,
            inn.leg_byes,
            inn.wides,
            inn.no_balls,
            inn.penalties,
            models.Match.victory_type,
        ).select_from(inn)
        stmt = self._contextualize(stmt, inn.match_id, side, other)
        return self._extract("team_innings", self._with_result(stmt, side))

    @staticmethod
    def _with_result(stmt: Select, team_id) -> Select:
        result = aliased(models.ExtraMatchDetail, name="result_detail")
        return stmt.add_columns(result.result.label("result")).join(
            result,
            and_(result.match_id == models.Match.id, result.team_id == team_id),
        )

    def target_innings(self, victory_type: models.VictoryType, first_innings_only: bool) -> pd.DataFrame:
        """Innings of the losing side in matches decided by ``victory_type``."""
        inn = models.Innings
        match = models.Match
        winners = aliased(models.Team, name="winning_team")
        losers = aliased(models.Team, name="losing_team")
        winner_detail = aliased(models.ExtraMatchDetail, name="winner_detail")
        stmt = (
            select(
                match.id.label("match_id"),
                match.match_type,
                inn.innings_order,
                inn.total,
                match.how_much,
                match.match_title,
                match.series_date,
                match.match_start_date.label("match_date"),
                match.result_string,
                match.who_won_id.label("winning_team_id"),
                winners.name.label("winning_team"),
                losers.name.label("losing_team"),
                models.Ground.known_as.label("ground"),
            )
            .select_from(inn)
            .join(self.matches, self.matches.c.match_id == inn.match_id)
            .join(match, match.id == inn.match_id)
            .join(winner_detail, and_(winner_detail.match_id == match.id, winner_detail.team_id == match.who_won_id))
            .join(winners, winners.id == match.who_won_id)
            .join(losers, losers.id == match.who_lost_id)
            .join(models.Ground, models.Ground.id == match.location_id)
            .where(
                match.victory_type == int(victory_type),
                inn.team_id == match.who_lost_id,
                *self.resolver.team_conditions(winner_detail),
            )
        )
        if first_innings_only:
            stmt = stmt.where(inn.innings_order == 1)
        return self._extract("targets", stmt)

    def appearances(self, key: DimensionKey) -> pd.DataFrame:
        """Matches played, teams represented and first/last year per player and dimension value."""
        pm = models.PlayerMatch
        match = models.Match
        detail = models.ExtraMatchDetail
        dims = key.appearance_columns()
        group_columns: List = [pm.player_id, *[column.element for column in dims]]

        def restrict(stmt: Select) -> Select:
            return (
                stmt.join(self.matches, self.matches.c.match_id == pm.match_id)
                .join(match, match.id == pm.match_id)
                .join(detail, and_(detail.match_id == pm.match_id, detail.team_id == pm.team_id))
                .where(
                    pm.player_id != models.TEAM_TOTAL_PLAYER_ID,
                    *self.resolver.team_conditions(detail),
                )
            )

        counts_query = restrict(
            select(
                pm.player_id,
                *dims,
                func.count(distinct(pm.match_id)).label("matches"),
                func.min(match.match_start_year).label("debut"),
                func.max(match.match_start_year).label("end"),
            ).select_from(pm)
        ).where(pm.is_substitute_fielder != 1).group_by(*group_columns)
        teams_query = restrict(
            select(pm.player_id, *dims, models.Team.name.label("team_name"))
            .select_from(pm)
            .join(models.Team, models.Team.id == pm.team_id)
        ).distinct()

        counts = self.staging.read(self.staging.materialize("match_counts", counts_query))
        teams = self.staging.read(self.staging.materialize("player_teams", teams_query))

        if teams.empty:
            return counts.assign(teams=None)
        partition = ["player_id", *key.key_columns]
        teams = (
            teams.groupby(partition, dropna=False)["team_name"]
            .agg(lambda names: ", ".join(sorted(set(names))))
            .reset_index()
            .rename(columns={"team_name": "teams"})
        )
        return counts.merge(teams, on=partition, how="left")
