"""
Shared builders for activity logs and users.

Dates default to the week of Monday 2025-06-09 (UTC).
"""
import datetime

import pytest

from stepwise.models import ActivityFactor, ActivityLog, UserActivityData

WEEK_MONDAY = datetime.datetime(2025, 6, 9, 8, 0, tzinfo=datetime.timezone.utc)


def make_log(day=0, steps=7500, calories=300, active_hours=10, active_hours_goal=10,
             inactivity=0, inactivity_goal=600, intense_minutes=0, log_id=None, extra_factors=()):
    """One day of activity; pass None for a metric to leave its factor out."""
    factors = []
    if steps is not None:
        factors.append(ActivityFactor(name="steps", value=steps, goal=7500, unit="count"))
    if calories is not None:
        factors.append(ActivityFactor(name="active_calories", value=calories, unit="kcal"))
    if active_hours is not None:
        factors.append(ActivityFactor(name="active_hours", value=active_hours, goal=active_hours_goal, unit="hour"))
    if inactivity is not None:
        factors.append(ActivityFactor(name="extended_inactivity", value=inactivity, goal=inactivity_goal, unit="minute"))
    if intense_minutes is not None:
        factors.append(ActivityFactor(name="intense_activity_duration", value=intense_minutes, unit="minute"))
    factors.extend(extra_factors)
    return ActivityLog(
        id=log_id or f"log-{day}",
        scoreDateTime=WEEK_MONDAY + datetime.timedelta(days=day),
        score=0.5,
        factors=factors,
    )


def make_user(user_id, daily_steps, **log_kwargs):
    """A user whose week has one log per entry in daily_steps."""
    logs = [make_log(day=i, steps=steps, log_id=f"{user_id}-{i}", **log_kwargs) for i, steps in enumerate(daily_steps)]
    return UserActivityData.from_logs(user_id, logs)


@pytest.fixture
def baseline_factors():
    """The reference day: on-threshold steps at the reference calorie ratio, full active hours."""
    from stepwise.factors import extract_factors
    return extract_factors(make_log())


@pytest.fixture
def cohort():
    return [
        make_user("strong-walker", [12000] * 7, calories=600, active_hours=9),
        make_user("steady-walker", [7600] * 7),
        make_user("light-walker", [3000, 4000, 2500, 3500, 4200, 3800, 3100], calories=60, active_hours=2,
                  inactivity=1000),
        UserActivityData(userId="no-data", logs=[], weeklyAverageSteps=0),
    ]
