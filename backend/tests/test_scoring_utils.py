import math

import pytest

from app.services.analytics.calculator import aggregate_overall
from app.services.analytics.strategies import clamp_score, round_half_away


@pytest.mark.parametrize(
    "value, expected",
    [
        (2.4999, 2),
        (2.5, 3),
        (33.5, 34),
        (34.5, 35),
        (-2.5, -3),
        (0.0, 0),
    ],
)
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, 1),
        (-20.0, 1),
        (0.5, 1),
        (1.5, 2),
        (12.5, 13),
        (99.4, 99),
        (99.5, 100),
        (250.0, 100),
    ],
)
def test_clamp_score_bounds(value, expected):
    assert clamp_score(value) == expected


def test_clamp_score_non_finite():
    assert clamp_score(math.nan) == 1
    assert clamp_score(math.inf) == 100
    assert clamp_score(-math.inf) == 1


def test_aggregate_overall_rounds_half_away_from_zero():
    # mean 34.5; round-half-to-even would give 34
    assert aggregate_overall([10, 20, 30, 40, 50, 57]) == 35
    assert aggregate_overall([10, 20, 30, 40, 50, 51]) == 34


def test_aggregate_overall_uses_rounded_sub_scores():
    # raw 12.5 and 12.5 round to 13 each before averaging
    subs = [clamp_score(12.5), clamp_score(12.5), 10, 10, 10, 10]
    assert subs[:2] == [13, 13]
    assert aggregate_overall(subs) == 11


def test_aggregate_overall_empty():
    assert aggregate_overall([]) == 0
