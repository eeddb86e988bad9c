import pytest

from conftest import make_log
from stepwise.activity_score import calculate_activity_score
from stepwise.factors import extract_factors, factor_goal, factor_value
from stepwise.models import ActivityFactor
from stepwise.scorers import (
    calculate_balance_score,
    calculate_efficiency_score,
    calculate_steps_goal_percentage,
    calculate_steps_score,
)
from stepwise.scoring_config import ScoringConfig


def test_extract_factors_last_duplicate_wins_and_keeps_unknown_names():
    log = make_log(steps=1000, extra_factors=[
        ActivityFactor(name="steps", value=2000),
        ActivityFactor(name="floors_climbed", value=12),
    ])
    factors = extract_factors(log)
    assert factors["steps"].value == 2000
    assert factors["floors_climbed"].value == 12


def test_missing_factor_reads_as_zero_and_default_goal():
    factors = extract_factors(make_log(active_hours=None))
    assert factor_value(factors, "active_hours") == 0
    assert factor_goal(factors, "active_hours", 10) == 10


def test_reference_day_scores(baseline_factors):
    assert calculate_steps_score(7500) == 100
    assert calculate_efficiency_score(baseline_factors) == pytest.approx(50)
    assert calculate_balance_score(baseline_factors) == pytest.approx(70)
    assert calculate_activity_score(baseline_factors, 100) == pytest.approx(79.0)


def test_steps_score_is_proportional_and_capped():
    assert calculate_steps_score(0) == 0
    assert calculate_steps_score(3750) == pytest.approx(50)
    assert calculate_steps_score(15000) == 100


def test_steps_score_follows_injected_threshold():
    assert calculate_steps_score(5000, ScoringConfig(step_goal_threshold=10000)) == pytest.approx(50)
    assert calculate_steps_score(5000, ScoringConfig(step_goal_threshold=5000)) == 100


def test_steps_goal_percentage_is_uncapped_and_zero_without_steps():
    assert calculate_steps_goal_percentage(extract_factors(make_log(steps=15000))) == pytest.approx(200)
    assert calculate_steps_goal_percentage(extract_factors(make_log(steps=None))) == 0


def test_efficiency_is_zero_without_steps():
    factors = extract_factors(make_log(steps=0, calories=500))
    assert calculate_efficiency_score(factors) == 0


def test_efficiency_is_capped_at_100():
    factors = extract_factors(make_log(steps=5000, calories=1000))
    assert calculate_efficiency_score(factors) == 100


def test_efficiency_uses_configured_reference_ratio():
    factors = extract_factors(make_log(steps=10000, calories=200))
    assert calculate_efficiency_score(factors, ScoringConfig(avg_calories_per_step=0.02)) == pytest.approx(50)


def test_balance_uses_default_goals_when_missing():
    log = make_log(active_hours=5, active_hours_goal=None, inactivity=1200, inactivity_goal=None, intense_minutes=45)
    # 5/10 * 40 = 20, inactivity ratio capped at 2 -> 0, intense capped at 30
    assert calculate_balance_score(extract_factors(log)) == pytest.approx(50)


def test_balance_with_no_factors_only_scores_the_inactivity_term():
    assert calculate_balance_score({}) == 30


def test_activity_score_weights_are_overridable(baseline_factors):
    steps_only = ScoringConfig(activity_score_weights={"steps": 1, "efficiency": 0, "balance": 0, "consistency": 0})
    factors = extract_factors(make_log(steps=3750))
    assert calculate_activity_score(factors, 100, steps_only) == pytest.approx(50)


@pytest.mark.parametrize("log_kwargs", [
    dict(steps=0, calories=0, active_hours=0, inactivity=0, intense_minutes=0),
    dict(steps=50000, calories=9000, active_hours=24, inactivity=0, intense_minutes=300),
    dict(steps=None, calories=None, active_hours=None, inactivity=None, intense_minutes=None),
    dict(steps=1, calories=400, active_hours=1, inactivity=5000, intense_minutes=2),
])
def test_component_scores_stay_within_bounds(log_kwargs):
    factors = extract_factors(make_log(**log_kwargs))
    for consistency in (0, 40, 50, 100):
        scores = [
            calculate_steps_score(factor_value(factors, "steps")),
            calculate_efficiency_score(factors),
            calculate_balance_score(factors),
            calculate_activity_score(factors, consistency),
        ]
        assert all(0 <= score <= 100 for score in scores)
