"""Dimension descriptors: the axis a records query is sliced by.

A descriptor names the detail-row columns a partition is keyed on, the display
columns that travel with those keys, and the SQL expressions that key match
appearances the same way.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from sqlalchemy.sql.elements import ColumnElement

from cricstats.db import models


class Dimension(str, enum.Enum):
    CAREER = "career"
    GROUND = "grounds"
    HOST_COUNTRY = "host-countries"
    OPPONENT = "opponents"
    SEASON = "seasons"
    YEAR_STARTED = "years"
    SERIES = "series"


# Label columns an aggregated row always carries, filled with None when the
# active dimension does not provide them.
LABEL_COLUMNS: Tuple[str, ...] = (
    "ground",
    "country_name",
    "series_date",
    "series_number",
    "match_start_year",
    "opponents",
)


@dataclass(frozen=True)
class DimensionKey:
    dimension: Dimension
    key_columns: Tuple[str, ...]
    label_columns: Tuple[str, ...]
    appearance_columns: Callable[[], List[ColumnElement]]


def _no_columns() -> List[ColumnElement]:
    return []


def _ground_columns() -> List[ColumnElement]:
    return [models.Match.location_id.label("ground_id")]


def _country_columns() -> List[ColumnElement]:
    return [models.Match.home_country_id.label("home_country_id")]


def _opponent_columns() -> List[ColumnElement]:
    return [models.ExtraMatchDetail.opponents_id.label("opponents_id")]


def _season_columns() -> List[ColumnElement]:
    return [models.Match.series_date.label("series_date")]


def _year_columns() -> List[ColumnElement]:
    return [models.Match.match_start_year.label("match_start_year")]


def _series_columns() -> List[ColumnElement]:
    return [
        models.Match.series_number.label("series_number"),
        models.Match.series_date.label("series_date"),
    ]


DIMENSIONS: Dict[Dimension, DimensionKey] = {
    Dimension.CAREER: DimensionKey(Dimension.CAREER, (), (), _no_columns),
    Dimension.GROUND: DimensionKey(Dimension.GROUND, ("ground_id",), ("ground",), _ground_columns),
    Dimension.HOST_COUNTRY: DimensionKey(
        Dimension.HOST_COUNTRY, ("home_country_id",), ("country_name",), _country_columns
    ),
    Dimension.OPPONENT: DimensionKey(Dimension.OPPONENT, ("opponents_id",), ("opponents",), _opponent_columns),
    Dimension.SEASON: DimensionKey(Dimension.SEASON, ("series_date",), (), _season_columns),
    Dimension.YEAR_STARTED: DimensionKey(
        Dimension.YEAR_STARTED, ("match_start_year",), (), _year_columns
    ),
    Dimension.SERIES: DimensionKey(
        Dimension.SERIES, ("series_number", "series_date"), (), _series_columns
    ),
}


def dimension_key(dimension: Dimension) -> DimensionKey:
    return DIMENSIONS[dimension]
