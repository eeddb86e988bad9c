"""
Bounded component scores for a single day of activity.

Every scorer is a pure function of a factor map (see `factors.extract_factors`)
and returns a value in [0, 100]. Both the daily activity score and the weekly
aggregator call these same functions.
"""
from typing import Optional

from . import scoring_config as defaults
from .factors import (
    ACTIVE_CALORIES,
    ACTIVE_HOURS,
    EXTENDED_INACTIVITY,
    INTENSE_ACTIVITY_DURATION,
    STEPS,
    FactorMap,
    factor_goal,
    factor_value,
)
from .scoring_config import ScoringConfig
from .stats import clamp


def calculate_steps_score(steps: float, config: Optional[ScoringConfig] = None) -> float:
    """Steps as a percentage of the step goal threshold, capped at 100."""
    config = config or ScoringConfig()
    if not steps:
        return 0.0
    return clamp(steps / config.step_goal_threshold * 100, 0, 100)


def calculate_steps_goal_percentage(factors: FactorMap, config: Optional[ScoringConfig] = None) -> float:
    """Uncapped share of the threshold reached; 0 when the day has no steps factor."""
    config = config or ScoringConfig()
    if STEPS not in factors:
        return 0.0
    return factors[STEPS].value / config.step_goal_threshold * 100


def calculate_efficiency_score(factors: FactorMap, config: Optional[ScoringConfig] = None) -> float:
    """
    Calories burned per step relative to the reference ratio.

    Burning exactly the reference ratio scores 50; twice the ratio or more
    scores 100. A day without steps scores 0.
    """
    config = config or ScoringConfig()
    steps = factor_value(factors, STEPS)
    calories = factor_value(factors, ACTIVE_CALORIES)
    if steps == 0:
        return 0.0

    calories_per_step = calories / steps
    efficiency_ratio = calories_per_step / config.avg_calories_per_step
    return clamp(efficiency_ratio * 50, 0, 100)


def calculate_balance_score(factors: FactorMap) -> float:
    """
    Activity distribution over the day, built from three capped terms:
      - active hours against their goal, up to 40
      - extended inactivity, 30 when none, losing 15 per goal's worth (floor 0)
      - intense activity minutes, one point each, up to 30
    """
    active_hours = factor_value(factors, ACTIVE_HOURS)
    active_hours_goal = factor_goal(factors, ACTIVE_HOURS, defaults.DEFAULT_ACTIVE_HOURS_GOAL)
    inactivity = factor_value(factors, EXTENDED_INACTIVITY)
    inactivity_goal = factor_goal(factors, EXTENDED_INACTIVITY, defaults.DEFAULT_INACTIVITY_GOAL)
    intense_activity = factor_value(factors, INTENSE_ACTIVITY_DURATION)

    active_hours_score = min((active_hours / active_hours_goal) * 40, 40)
    inactivity_ratio = min(inactivity / inactivity_goal, 2)
    inactivity_score = max(30 - (inactivity_ratio * 15), 0)
    intense_score = min(intense_activity * 1, 30)

    return clamp(active_hours_score + inactivity_score + intense_score, 0, 100)
