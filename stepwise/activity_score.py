from typing import List, Optional

from . import scoring_config as defaults
from .factors import ACTIVE_CALORIES, ACTIVE_HOURS, EXTENDED_INACTIVITY, STEPS, FactorMap, factor_value
from .models import ActivityFactor
from .scorers import calculate_balance_score, calculate_efficiency_score, calculate_steps_score
from .scoring_config import ScoringConfig
from .stats import clamp, format_number, round_half_up


def calculate_activity_score(factors: FactorMap, consistency_bonus: float, config: Optional[ScoringConfig] = None) -> float:
    """
    Calculate the unified activity score for one day.

    With the default weights: steps (40%), efficiency (30%), balance (20%),
    consistency (10%). The consistency bonus is the week's value, reused
    for every day.
    """
    config = config or ScoringConfig()
    steps_score = calculate_steps_score(factor_value(factors, STEPS), config)
    efficiency_score = calculate_efficiency_score(factors, config)
    balance_score = calculate_balance_score(factors)

    score = (
        steps_score * config.weight("steps") +
        efficiency_score * config.weight("efficiency") +
        balance_score * config.weight("balance") +
        consistency_bonus * config.weight("consistency")
    )
    return clamp(score, 0, 100)


def generate_steps_insights(steps_factor: Optional[ActivityFactor], config: Optional[ScoringConfig] = None) -> List[str]:
    config = config or ScoringConfig()
    if steps_factor is None:
        return ["No step data available"]

    threshold = config.step_goal_threshold
    steps = steps_factor.value
    percentage = round_half_up(steps / threshold * 100)
    steps_text = format_number(steps, grouped=True)

    if steps >= threshold * defaults.OUTSTANDING_STEPS_RATIO:
        return [f"Outstanding step achievement: {steps_text} steps ({percentage}% of threshold)"]
    if steps >= threshold:
        return [f"Excellent step count: {steps_text} steps ({percentage}% of threshold)"]
    if steps >= threshold * defaults.GOOD_STEPS_RATIO:
        return [f"Good step progress: {steps_text} steps, close to threshold"]
    return [f"Steps below threshold: {steps_text} steps ({percentage}% of {format_number(threshold, grouped=True)})"]


def generate_consistency_insights(consistency_bonus: float) -> List[str]:
    if consistency_bonus >= defaults.STRONG_CONSISTENCY_SCORE:
        return ["Strong consistency: improving or maintaining performance"]
    if consistency_bonus >= defaults.MODERATE_CONSISTENCY_SCORE:
        return ["Moderate consistency: slight performance variation"]
    return ["Consistency opportunity: performance below recent average"]


def generate_points_insights(factors: FactorMap, consistency_bonus: float) -> List[str]:
    """Insights for everything except raw step count: efficiency, spread, sitting time, consistency."""
    insights = []
    active_hours = factor_value(factors, ACTIVE_HOURS)
    inactivity = factor_value(factors, EXTENDED_INACTIVITY)
    calories = factor_value(factors, ACTIVE_CALORIES)
    steps = factor_value(factors, STEPS)

    if steps > 0:
        efficiency = calories / steps * 1000
        if efficiency >= defaults.HIGH_EFFICIENCY_CAL_PER_1000_STEPS:
            insights.append(f"High calorie burn efficiency: {efficiency:.1f} cal per 1000 steps")
        elif efficiency >= defaults.MODERATE_EFFICIENCY_CAL_PER_1000_STEPS:
            insights.append(f"Moderate activity intensity: {format_number(calories)} active calories burned")

    if active_hours >= defaults.EXCELLENT_ACTIVE_HOURS:
        insights.append(f"Excellent activity distribution: {format_number(active_hours)} active hours")
    elif active_hours >= defaults.GOOD_ACTIVE_HOURS:
        insights.append(f"Good activity spread: {format_number(active_hours)} active hours throughout the day")

    if inactivity > defaults.HIGH_INACTIVITY_MINUTES:
        insights.append(f"High inactivity: {round_half_up(inactivity / 60)} hours of extended sitting")

    insights.extend(generate_consistency_insights(consistency_bonus))
    return insights


def generate_activity_insights(factors: FactorMap, consistency_bonus: float, config: Optional[ScoringConfig] = None) -> List[str]:
    """Steps insights followed by the other factors and consistency."""
    return generate_steps_insights(factors.get(STEPS), config) + generate_points_insights(factors, consistency_bonus)
