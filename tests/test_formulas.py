import math

import numpy as np
import pandas as pd
import pytest

from cricstats.services.records import formulas


def _series(*values):
    return pd.Series(values, dtype="float64")


def test_batting_statistics_for_a_typical_career():
    runs, innings, not_outs, balls = _series(400), _series(10), _series(2), _series(500)

    average = formulas.batting_average(runs, innings, not_outs)
    strike_rate = formulas.batting_strike_rate(runs, balls)
    index = formulas.batting_index(average, strike_rate)

    assert formulas.completed_innings(innings, not_outs).iloc[0] == 8
    assert average.iloc[0] == pytest.approx(50.0)
    assert strike_rate.iloc[0] == pytest.approx(80.0)
    assert index.iloc[0] == pytest.approx(63.2455, abs=1e-4)


def test_batting_zero_guards_report_zero():
    average = formulas.batting_average(_series(35), _series(3), _series(3))
    strike_rate = formulas.batting_strike_rate(_series(35), _series(0))

    assert average.iloc[0] == 0.0
    assert strike_rate.iloc[0] == 0.0
    assert formulas.batting_index(average, strike_rate).iloc[0] == 0.0


def test_strike_rate_is_null_when_balls_are_unknown():
    strike_rate = formulas.batting_strike_rate(_series(35), _series(np.nan))
    assert math.isnan(strike_rate.iloc[0])


def test_average_is_truncated_not_rounded():
    average = formulas.batting_average(_series(200), _series(3), _series(0))
    assert average.iloc[0] == pytest.approx(66.66)


def test_truncate_ignores_floating_point_noise():
    assert formulas.truncate(_series(0.29), 2).iloc[0] == pytest.approx(0.29)
    assert formulas.truncate(_series(-1.239), 2).iloc[0] == pytest.approx(-1.23)


def test_computed_balls_is_null_when_an_entry_has_no_ball_count():
    balls = formulas.computed_balls(
        balls_sum=_series(100, 100),
        balls_recorded=_series(3, 3),
        entries=_series(4, 5),
        excluded_entries=_series(1, 1),
    )
    assert balls.iloc[0] == 100
    assert math.isnan(balls.iloc[1])


def test_bowling_without_wickets():
    runs, balls, wickets = _series(45), _series(60), _series(0)

    assert formulas.bowling_average(runs, wickets).iloc[0] == 0
    assert formulas.economy_rate(runs, balls).iloc[0] == pytest.approx(4.5)
    assert formulas.bowling_strike_rate(balls, wickets).iloc[0] == 0
    assert formulas.bowling_index(runs, balls, wickets).iloc[0] == 0


def test_bowling_index_combines_average_and_runs_per_hundred_balls():
    runs, balls, wickets = _series(100), _series(200), _series(4)
    expected = math.sqrt(25.0 * 50.0)
    assert formulas.bowling_index(runs, balls, wickets).iloc[0] == pytest.approx(expected)


def test_economy_with_no_balls_bowled_is_zero():
    assert formulas.economy_rate(_series(12), _series(0)).iloc[0] == 0


def test_fielding_totals():
    caught_fielder, caught_keeper, stumped = _series(2), _series(5), _series(1)
    assert formulas.fielding_dismissals(caught_fielder, caught_keeper, stumped).iloc[0] == 8
    assert formulas.wicket_keeper_dismissals(caught_keeper, stumped).iloc[0] == 6


def test_partnership_average_is_null_when_every_partnership_was_unbroken():
    average = formulas.partnership_average(_series(150, 150), _series(2, 3), _series(2, 1))
    assert math.isnan(average.iloc[0])
    assert average.iloc[1] == pytest.approx(75.0)


def test_team_rates_default_to_zero():
    assert formulas.team_average(_series(120), _series(0)).iloc[0] == 0.0
    assert formulas.run_rate(_series(120), _series(0)).iloc[0] == 0.0
    assert formulas.team_strike_rate(_series(120), _series(0)).iloc[0] == 0.0
    assert formulas.run_rate(_series(301), _series(300)).iloc[0] == pytest.approx(6.02)


def test_extras_percentage():
    percentage = formulas.extras_percentage(_series(15, 4), _series(300, 0))
    assert percentage.iloc[0] == pytest.approx(5.0)
    assert math.isnan(percentage.iloc[1])


def test_flag_encoding_marks_not_out_scores():
    encoded = formulas.flag_encode(_series(50, 50), pd.Series([True, False]))
    assert list(encoded) == [50.5, 50.0]

    score, not_out = formulas.flag_decode(encoded)
    assert list(score) == [50, 50]
    assert list(not_out) == [True, False]


def test_synthetic_best_bowling_orders_figures():
    synthetic = formulas.synthetic_best_bowling(_series(5, 5, 6, 3), _series(40, 45, 90, 0))

    assert synthetic.iloc[0] > synthetic.iloc[1]
    assert synthetic.iloc[2] > synthetic.iloc[0]
    assert synthetic.iloc[3] == pytest.approx(3.9)


def test_overs_rendering():
    assert formulas.overs(39) == "6.3"
    assert formulas.overs(36) == "6"
    assert formulas.overs(41, balls_per_over=8) == "5.1"
    assert formulas.overs(None) is None
    assert list(formulas.overs_from_balls(_series(12, np.nan), _series(6, 6))) == ["2", None]
