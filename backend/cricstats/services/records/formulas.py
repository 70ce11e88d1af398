"""Derived statistics computed from aggregated raw counts.

All functions take and return pandas Series so they apply to a whole result
frame at once. Guards follow the published records conventions: several
statistics report ``0`` rather than "not applicable" when the divisor is zero,
and callers must not reinterpret those zeros.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd

# Dismissal codes that do not count as a batting innings (did not bat, absent)
NON_INNINGS_DISMISSAL_TYPES = (11, 14, 15)
# Dismissal codes whose entries are ignored when checking ball counts
EXCLUDED_BALL_DISMISSAL_TYPES = (14, 16)

# Fraction added to a value to flag "not out" / "unbroken"
FLAG_FRACTION = 0.5
# Fraction used by the synthetic best-bowling encoding when no runs were conceded
ZERO_RUNS_FRACTION = 0.9


def truncate(values: pd.Series, decimals: int) -> pd.Series:
    """Truncate toward zero, ignoring binary floating point noise (0.29 stays 0.29)."""
    factor = 10 ** decimals
    return np.trunc((values * factor).round(9)) / factor


def _divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    return numerator / denominator.replace(0, np.nan)


def completed_innings(innings: pd.Series, not_outs: pd.Series) -> pd.Series:
    return innings - not_outs


def batting_average(runs: pd.Series, innings: pd.Series, not_outs: pd.Series) -> pd.Series:
    completed = completed_innings(innings, not_outs)
    return truncate(_divide(runs, completed), 2).mask(completed == 0, 0.0)


def batting_strike_rate(runs: pd.Series, balls: pd.Series) -> pd.Series:
    """Runs per hundred balls; null when the ball count is unknown."""
    return (_divide(runs, balls) * 100).mask(balls == 0, 0.0)


def batting_index(average: pd.Series, strike_rate: pd.Series) -> pd.Series:
    return np.sqrt(average * strike_rate)


def computed_balls(
    balls_sum: pd.Series,
    balls_recorded: pd.Series,
    entries: pd.Series,
    excluded_entries: pd.Series,
) -> pd.Series:
    """Balls faced, or null when some counted entries have no ball count."""
    return balls_sum.where(balls_recorded >= entries - excluded_entries)


def bowling_average(runs: pd.Series, wickets: pd.Series) -> pd.Series:
    return truncate(_divide(runs, wickets), 2).mask(wickets == 0, 0.0)


def economy_rate(runs: pd.Series, balls: pd.Series) -> pd.Series:
    return truncate(_divide(runs, balls) * 6, 2).mask(balls == 0, 0.0)


def bowling_strike_rate(balls: pd.Series, wickets: pd.Series) -> pd.Series:
    return _divide(balls, wickets).mask(wickets == 0, 0.0)


def bowling_index(runs: pd.Series, balls: pd.Series, wickets: pd.Series) -> pd.Series:
    average = bowling_average(runs, wickets)
    runs_per_hundred = _divide(runs, balls) * 100
    return np.sqrt(average * runs_per_hundred).mask((wickets == 0) | (balls == 0), 0.0)


def fielding_dismissals(caught_fielder: pd.Series, caught_keeper: pd.Series, stumped: pd.Series) -> pd.Series:
    return caught_fielder + caught_keeper + stumped


def wicket_keeper_dismissals(caught_keeper: pd.Series, stumped: pd.Series) -> pd.Series:
    return caught_keeper + stumped


def partnership_average(runs: pd.Series, innings: pd.Series, unbroken: pd.Series) -> pd.Series:
    """Average per completed partnership; null (not zero) when none completed."""
    return truncate(_divide(runs, innings - unbroken), 2)


def team_average(runs: pd.Series, wickets: pd.Series) -> pd.Series:
    return truncate(_divide(runs, wickets), 2).fillna(0.0)


def run_rate(runs: pd.Series, balls: pd.Series) -> pd.Series:
    return truncate(_divide(runs, balls) * 6, 2).fillna(0.0)


def team_strike_rate(runs: pd.Series, balls: pd.Series) -> pd.Series:
    return (_divide(runs, balls) * 100).fillna(0.0)


def extras_percentage(extras: pd.Series, runs: pd.Series) -> pd.Series:
    return truncate(_divide(extras, runs) * 100, 1)


def flag_encode(values: pd.Series, flags: pd.Series) -> pd.Series:
    """Encode a boolean flag into the fractional part of a whole-number value."""
    return values + flags.astype(bool) * FLAG_FRACTION


def flag_decode(encoded: pd.Series) -> Tuple[pd.Series, pd.Series]:
    whole = np.floor(encoded)
    return whole, (encoded - whole) > 0


def synthetic_best_bowling(wickets: pd.Series, runs: pd.Series) -> pd.Series:
    """Single value ranking bowling figures: more wickets, then fewer runs, is larger."""
    fraction = (0.1 / runs.replace(0, np.nan)).fillna(ZERO_RUNS_FRACTION)
    return wickets + fraction


def overs(balls, balls_per_over: int = 6):
    """Render a ball count as overs, e.g. 39 balls of six -> "6.3"."""
    if balls is None or pd.isna(balls):
        return None
    whole, part = divmod(int(balls), int(balls_per_over))
    return f"{whole}.{part}" if part else f"{whole}"


def overs_from_balls(balls: pd.Series, balls_per_over: pd.Series) -> pd.Series:
    return pd.Series(
        [overs(b, bpo) for b, bpo in zip(balls, balls_per_over)],
        index=balls.index,
        dtype=object,
    )
