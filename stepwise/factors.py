from typing import Dict, Optional

from .models import ActivityFactor, ActivityLog

FactorMap = Dict[str, ActivityFactor]

STEPS = "steps"
ACTIVE_CALORIES = "active_calories"
ACTIVE_HOURS = "active_hours"
EXTENDED_INACTIVITY = "extended_inactivity"
INTENSE_ACTIVITY_DURATION = "intense_activity_duration"


def extract_factors(log: ActivityLog) -> FactorMap:
    """
    Keys a log's factors by name.

    Later factors overwrite earlier ones with the same name. Unknown names are
    kept; scorers simply never look them up.
    """
    factor_map: FactorMap = {}
    for factor in log.factors:
        factor_map[factor.name] = factor
    return factor_map


def factor_value(factors: FactorMap, name: str) -> float:
    factor = factors.get(name)
    return factor.value if factor is not None else 0


def factor_goal(factors: FactorMap, name: str, default: float) -> float:
    """Returns the factor's goal, or the default when the factor or its goal is missing or zero."""
    factor: Optional[ActivityFactor] = factors.get(name)
    if factor is not None and factor.goal:
        return factor.goal
    return default
