from typing import List, Optional

from .models import ActivityLog
from .scoring_config import ScoringConfig
from .stats import clamp, population_stddev, round_half_up


def calculate_weekly_consistency_bonus(logs: List[ActivityLog], config: Optional[ScoringConfig] = None) -> int:
    """
    Calculate a weekly consistency score from the standard deviation of daily steps.

    Lower stddev means a steadier week and a higher score: 100 for identical
    days, dropping linearly to the floor (40 by default) at one full scale of
    stddev (2000 steps). A week with no logs gets the neutral empty-week
    score (50), which is returned as-is rather than clamped.
    """
    config = config or ScoringConfig()
    if not logs:
        return config.consistency_empty_week_score

    daily_steps = [log.steps() for log in logs]
    stddev = population_stddev(daily_steps)

    score = 100 - (stddev / config.consistency_stddev_scale) * config.consistency_point_spread
    return round_half_up(clamp(score, config.consistency_floor, 100))
