from typing import List, NamedTuple, Optional

from .models import Classification, UserActivityData
from .scoring_config import ScoringConfig
from .stats import round_half_up


class EmptyCohortError(ValueError):
    """Raised when a cohort-wide statistic is requested for zero users."""


class ClassificationResult(NamedTuple):
    winners: List[UserActivityData]
    losers: List[UserActivityData]
    overall_weekly_average: int


def classify_user(weekly_average_steps: float, config: Optional[ScoringConfig] = None) -> Classification:
    """Classify a user as winner or loser based on their weekly average steps."""
    config = config or ScoringConfig()
    return "winner" if weekly_average_steps >= config.step_goal_threshold else "loser"


def classify_users(users_data: List[UserActivityData], config: Optional[ScoringConfig] = None) -> ClassificationResult:
    """
    Partition a cohort into winners and losers.

    The overall weekly average is taken over every user, including those
    with no logs (who contribute 0). An empty cohort has no average and
    raises EmptyCohortError.
    """
    if not users_data:
        raise EmptyCohortError("Cannot classify an empty cohort: no users to average over.")

    winners = []
    losers = []
    for user_data in users_data:
        if classify_user(user_data.weeklyAverageSteps, config) == "winner":
            winners.append(user_data)
        else:
            losers.append(user_data)

    total_average = sum(user.weeklyAverageSteps for user in users_data) / len(users_data)
    return ClassificationResult(winners, losers, round_half_up(total_average))
