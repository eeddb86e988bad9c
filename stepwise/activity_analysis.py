from typing import List, Optional

from .models import AnalysisResult
from .sahha_client import SahhaClient, get_current_week_date_range
from .scoring_config import ScoringConfig
from .weekly_aggregator import analyze_users_activity


class ActivityAnalysisService:
    """
    Runs the weekly analysis for a list of participants: fetches the current
    week's logs from Sahha, then scores, ranks and classifies everyone.
    """
    def __init__(self, client: Optional[SahhaClient] = None, config: Optional[ScoringConfig] = None):
        self.client = client or SahhaClient()
        self.config = config or ScoringConfig.from_env()

    def analyze_users_activity(self, user_ids: List[str], start_date_time: Optional[str] = None,
                               end_date_time: Optional[str] = None) -> AnalysisResult:
        if start_date_time is None or end_date_time is None:
            start_date_time, end_date_time = get_current_week_date_range()

        # Each participant is fetched and ranked once, in first-seen order
        user_ids = list(dict.fromkeys(user_ids))
        users_data = self.client.fetch_multiple_users_activity_logs(user_ids, start_date_time, end_date_time)
        result = analyze_users_activity(users_data, self.config)

        summary = result.winnerLoserAnalysis
        print(f"ActivityAnalysis: Scored {len(result.analyses)} of {len(user_ids)} user(s). "
              f"Winners: {len(summary.winners)}, Losers: {len(summary.losers)}, "
              f"Cohort average steps: {summary.overallWeeklyAverageSteps}")
        return result
