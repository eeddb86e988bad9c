import os
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

# Weekly average steps a participant needs to be classified as a winner.
# Also the normalisation goal for the daily steps score.
STEP_GOAL_THRESHOLD = 7500

# Reference calorie burn per step; a user burning exactly this scores 50 on efficiency
AVG_CALORIES_PER_STEP = 0.04

# Weights for the unified activity score (must cover steps/efficiency/balance/consistency)
ACTIVITY_SCORE_WEIGHTS = {
    "steps": 0.4,
    "efficiency": 0.3,
    "balance": 0.2,
    "consistency": 0.1,
}

# WEEKLY CONSISTENCY BONUS
# score = 100 - (stddev / SCALE) * SPREAD, clamped to [FLOOR, 100]
CONSISTENCY_STDDEV_SCALE = 2000     # steps
CONSISTENCY_POINT_SPREAD = 60       # points lost at one full scale of stddev
CONSISTENCY_FLOOR = 40
CONSISTENCY_EMPTY_WEEK_SCORE = 50   # neutral score when a user has no logs at all

# BALANCE SCORE DEFAULTS (used when the upstream factor carries no goal)
DEFAULT_ACTIVE_HOURS_GOAL = 10
DEFAULT_INACTIVITY_GOAL = 600       # minutes

# INSIGHT THRESHOLDS
OUTSTANDING_STEPS_RATIO = 1.5
GOOD_STEPS_RATIO = 0.75
HIGH_EFFICIENCY_CAL_PER_1000_STEPS = 40
MODERATE_EFFICIENCY_CAL_PER_1000_STEPS = 30
EXCELLENT_ACTIVE_HOURS = 8
GOOD_ACTIVE_HOURS = 6
HIGH_INACTIVITY_MINUTES = 900
STRONG_CONSISTENCY_SCORE = 80
MODERATE_CONSISTENCY_SCORE = 60

# LOSER COHORT ISSUES
LOW_STEPS_VALUE = 5000
LOW_ACTIVITY_SCORE = 50
COMMON_ISSUE_SHARE = 0.6            # an issue is "common" above 60% of losers
TOP_INSIGHTS_COUNT = 3

# Points written for each winner are activityScore * this multiplier
REWARD_POINTS_MULTIPLIER = 1000


class ScoringConfig(BaseModel):
    """
    Tunable constants for one analysis run.

    Defaults mirror the module-level constants above. Pass an instance to the
    scoring functions instead of editing this module, so several thresholds
    can coexist in one process.
    """
    model_config = ConfigDict(frozen=True)

    step_goal_threshold: float = Field(default=STEP_GOAL_THRESHOLD, gt=0)
    avg_calories_per_step: float = Field(default=AVG_CALORIES_PER_STEP, gt=0)
    activity_score_weights: Dict[str, float] = Field(default_factory=lambda: dict(ACTIVITY_SCORE_WEIGHTS))

    consistency_stddev_scale: float = Field(default=CONSISTENCY_STDDEV_SCALE, gt=0)
    consistency_point_spread: float = CONSISTENCY_POINT_SPREAD
    consistency_floor: float = CONSISTENCY_FLOOR
    consistency_empty_week_score: int = CONSISTENCY_EMPTY_WEEK_SCORE

    low_steps_value: float = LOW_STEPS_VALUE
    low_activity_score: float = LOW_ACTIVITY_SCORE
    common_issue_share: float = COMMON_ISSUE_SHARE
    top_insights_count: int = TOP_INSIGHTS_COUNT

    def weight(self, component: str) -> float:
        return self.activity_score_weights.get(component, ACTIVITY_SCORE_WEIGHTS[component])

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Builds a config, letting the environment override the two curve-defining constants."""
        return cls(
            step_goal_threshold=float(os.getenv("STEP_GOAL_THRESHOLD", STEP_GOAL_THRESHOLD)),
            avg_calories_per_step=float(os.getenv("AVG_CALORIES_PER_STEP", AVG_CALORIES_PER_STEP)),
        )
