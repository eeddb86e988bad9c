import datetime
import json
import os
import traceback
from typing import Any, Dict, List, Optional

import requests

from . import scoring_config as config
from .activity_analysis import ActivityAnalysisService
from .models import AnalysisResult, PerformanceAnalysis


def sahha_id_to_bytes32(sahha_id: str) -> str:
    """1D0C697F-D20B-48FD-8658-978B970756F9 -> 0x1D0C697FD20B48FD8658978B970756F9"""
    return f"0x{sahha_id.replace('-', '')[:32]}"


def get_current_week_monday(now: Optional[datetime.datetime] = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(datetime.timezone.utc)
    monday = now.date() - datetime.timedelta(days=now.weekday())
    return monday.isoformat()


def build_points_rows(winners: List[PerformanceAnalysis],
                      multiplier: float = config.REWARD_POINTS_MULTIPLIER) -> List[Dict[str, Any]]:
    return [{"sahha_id": w.userId, "amount": w.activityScore * multiplier} for w in winners]


def build_reward_payload(result: AnalysisResult, week: str) -> Dict[str, Any]:
    """Shapes one week's winners into the payload the payout service consumes."""
    summary = result.winnerLoserAnalysis
    return {
        "reward_type": "weekly_steps_challenge",
        "week": week,
        "winners": [sahha_id_to_bytes32(w.userId) for w in summary.winners],
        "points": build_points_rows(summary.winners),
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "summary": {
            "total_analyzed": len(result.analyses),
            "total_winners": len(summary.winners),
            "total_losers": len(summary.losers),
            "overall_weekly_average_steps": summary.overallWeeklyAverageSteps,
        },
    }


class RewardDistributor:
    def __init__(self, reward_api_url: Optional[str] = None, timeout: float = 30, dry_run: bool = False):
        self.reward_api_url = None if dry_run else (reward_api_url or os.getenv("REWARD_API_URL"))
        self.timeout = timeout

    def distribute(self, payload: Dict[str, Any]) -> bool:
        """
        Sends the weekly reward payload to the payout service.

        Returns True on success. Without a configured REWARD_API_URL this is a
        dry run that only prints the payload.
        """
        print("RewardDistributor: Making weekly reward API call...")
        print(f"Payload: {json.dumps(payload, indent=2)}")

        if not self.reward_api_url:
            print("RewardDistributor: REWARD_API_URL not set, skipping the call (dry run).")
            return True

        try:
            response = requests.post(
                self.reward_api_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            print(f"RewardDistributor ERROR: Weekly reward API call failed. Details: {e}")
            return False

        print("RewardDistributor: Weekly reward API call successful!")
        return True


def run_weekly_distribution(user_ids: List[str], service: Optional[ActivityAnalysisService] = None,
                            distributor: Optional[RewardDistributor] = None) -> Dict[str, Any]:
    """
    Analyze this week's participants and hand the winners to the payout service.
    """
    week = get_current_week_monday()
    print(f"\n--- Starting weekly reward distribution for week {week} ---")

    if not user_ids:
        print("No participants for this week. Exiting.")
        return {"status": "skipped", "week": week, "reason": "no participants"}

    service = service or ActivityAnalysisService()
    distributor = distributor or RewardDistributor()
    try:
        result = service.analyze_users_activity(user_ids)
    except Exception as e:
        print(f"ERROR during weekly activity analysis: {e}")
        traceback.print_exc()
        return {"status": "error", "week": week, "error": str(e)}

    payload = build_reward_payload(result, week)
    print(f"Winners: {[w.userId for w in result.winnerLoserAnalysis.winners]}")

    distributed = distributor.distribute(payload)
    print("--------------------------------------------------")
    return {
        "status": "success" if distributed else "distribution_failed",
        "week": week,
        "payload": payload,
    }
