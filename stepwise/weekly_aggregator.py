"""
Weekly aggregation of daily activity into one ranked summary per user,
plus the cohort-wide winner/loser statistics.
"""
import datetime
from collections import Counter
from typing import List, Optional

from .activity_score import calculate_activity_score, generate_points_insights, generate_steps_insights
from .classification import classify_user, classify_users
from .consistency import calculate_weekly_consistency_bonus
from .factors import STEPS, extract_factors, factor_value
from .models import (
    ActivityLog,
    AnalysisResult,
    LoserStats,
    PerformanceAnalysis,
    UserActivityData,
    WinnerLoserAnalysis,
    WinnerStats,
)
from .scorers import calculate_balance_score, calculate_efficiency_score, calculate_steps_goal_percentage
from .scoring_config import ScoringConfig
from .stats import mean, round_half_up


def week_start(log: ActivityLog) -> datetime.date:
    """Monday (UTC) on or before the log's score date."""
    score_time = log.scoreDateTime
    if score_time.tzinfo is None:
        score_time = score_time.replace(tzinfo=datetime.timezone.utc)
    day = score_time.astimezone(datetime.timezone.utc).date()
    return day - datetime.timedelta(days=day.weekday())


def analyze_user_week(user_data: UserActivityData, config: Optional[ScoringConfig] = None) -> Optional[PerformanceAnalysis]:
    """
    Fold a user's daily logs into one weekly PerformanceAnalysis.

    Returns None for a user with no logs. The rank is left at 0; ranks only
    make sense once the whole cohort has been scored (see assign_ranks).
    """
    config = config or ScoringConfig()
    logs = user_data.logs
    if not logs:
        return None

    consistency_bonus = calculate_weekly_consistency_bonus(logs, config)
    all_factors = [extract_factors(log) for log in logs]

    activity_scores = [calculate_activity_score(f, consistency_bonus, config) for f in all_factors]
    steps_values = [factor_value(f, STEPS) for f in all_factors]
    steps_goal_percentages = [calculate_steps_goal_percentage(f, config) for f in all_factors]
    efficiency_scores = [calculate_efficiency_score(f, config) for f in all_factors]
    balance_scores = [calculate_balance_score(f) for f in all_factors]

    # Steps insights for every day first, then the rest; duplicates collapse to their first occurrence
    insights = []
    for factors in all_factors:
        insights.extend(generate_steps_insights(factors.get(STEPS), config))
    for factors in all_factors:
        insights.extend(generate_points_insights(factors, consistency_bonus))

    return PerformanceAnalysis(
        userId=user_data.userId,
        date=week_start(logs[0]),
        activityScore=round_half_up(mean(activity_scores), 2),
        stepsValue=round_half_up(mean(steps_values), 2),
        stepsGoalPercentage=round_half_up(mean(steps_goal_percentages), 2),
        efficiencyScore=round_half_up(mean(efficiency_scores), 2),
        balanceScore=round_half_up(mean(balance_scores), 2),
        consistencyBonus=consistency_bonus,
        rank=0,
        classification=classify_user(user_data.weeklyAverageSteps, config),
        insights=list(dict.fromkeys(insights)),
    )


def assign_ranks(analyses: List[PerformanceAnalysis]) -> List[PerformanceAnalysis]:
    """Sort by descending activity score (ties keep input order) and number from 1."""
    ranked = sorted(analyses, key=lambda a: a.activityScore, reverse=True)
    for index, analysis in enumerate(ranked):
        analysis.rank = index + 1
    return ranked


def calculate_winner_stats(winners: List[PerformanceAnalysis], config: Optional[ScoringConfig] = None) -> WinnerStats:
    config = config or ScoringConfig()
    if not winners:
        return WinnerStats()

    avg_steps = round_half_up(mean(w.stepsValue for w in winners))
    avg_activity_score = round_half_up(mean(w.activityScore for w in winners), 2)

    # Tally the headline of each insight, i.e. the text before its first colon
    insight_counts = Counter(insight.split(":")[0] for w in winners for insight in w.insights)
    top_insights = [insight for insight, _ in insight_counts.most_common(config.top_insights_count)]

    return WinnerStats(avgSteps=avg_steps, avgActivityScore=avg_activity_score, topInsights=top_insights)


def calculate_loser_stats(losers: List[PerformanceAnalysis], config: Optional[ScoringConfig] = None) -> LoserStats:
    config = config or ScoringConfig()
    if not losers:
        return LoserStats()

    avg_steps = round_half_up(mean(loser.stepsValue for loser in losers))
    avg_activity_score = round_half_up(mean(loser.activityScore for loser in losers), 2)

    common_issues = []
    low_steps_count = len([loser for loser in losers if loser.stepsValue < config.low_steps_value])
    low_score_count = len([loser for loser in losers if loser.activityScore < config.low_activity_score])

    if low_steps_count > len(losers) * config.common_issue_share:
        common_issues.append("Consistently low step counts")
    if low_score_count > len(losers) * config.common_issue_share:
        common_issues.append("Low overall activity score")

    return LoserStats(avgSteps=avg_steps, avgActivityScore=avg_activity_score, commonIssues=common_issues)


def analyze_users_activity(users_data: List[UserActivityData], config: Optional[ScoringConfig] = None) -> AnalysisResult:
    """
    Score, rank and classify a whole cohort for one week.

    A userId that appears more than once is scored from its first entry only.
    Raises EmptyCohortError when users_data is empty.
    """
    config = config or ScoringConfig()
    unique_users = {}
    for user_data in users_data:
        unique_users.setdefault(user_data.userId, user_data)
    users_data = list(unique_users.values())
    winners, losers, overall_weekly_average = classify_users(users_data, config)

    analyses = []
    for user_data in users_data:
        analysis = analyze_user_week(user_data, config)
        if analysis is not None:
            analyses.append(analysis)

    analyses = assign_ranks(analyses)

    winner_ids = {w.userId for w in winners}
    loser_ids = {loser.userId for loser in losers}
    winner_analyses = [a for a in analyses if a.userId in winner_ids]
    loser_analyses = [a for a in analyses if a.userId in loser_ids]

    return AnalysisResult(
        analyses=analyses,
        winnerLoserAnalysis=WinnerLoserAnalysis(
            winners=winner_analyses,
            losers=loser_analyses,
            overallWeeklyAverageSteps=overall_weekly_average,
            winnerStats=calculate_winner_stats(winner_analyses, config),
            loserStats=calculate_loser_stats(loser_analyses, config),
        ),
    )
