from celery import Celery
from celery.schedules import crontab
import os
import traceback
from typing import List, Optional
from stepwise.activity_analysis import ActivityAnalysisService
from stepwise.rewards import run_weekly_distribution

celery_app = Celery(
    'tasks',
    broker=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
    backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")
)
# --- CELERY BEAT SCHEDULE ---
celery_app.conf.beat_schedule = {
    'run-weekly-reward-distribution': {
        'task': 'weekly_reward_distribution_task',
        # Sunday 23:55 UTC, just before the challenge week closes
        'schedule': crontab(day_of_week='sun', hour=23, minute=55),
    }
}
celery_app.conf.timezone = 'UTC'


def get_participant_ids() -> List[str]:
    """Reads this week's participants from CHALLENGE_PARTICIPANTS (comma separated)."""
    raw = os.getenv("CHALLENGE_PARTICIPANTS", "")
    return [user_id.strip() for user_id in raw.split(",") if user_id.strip()]


@celery_app.task(name="activity_analysis_task")
def activity_analysis_task(user_ids: List[str]):
    """Background task that runs the weekly activity analysis and returns it as plain JSON data."""
    print(f"WORKER: Received activity analysis job for {len(user_ids)} user(s)")
    try:
        result = ActivityAnalysisService().analyze_users_activity(user_ids)
        return {"success": True, "data": result.model_dump(mode="json")}
    except Exception as e:
        print(f"WORKER ERROR (Analysis): An unexpected error occurred. Details: {e}")
        print(f"WORKER ERROR (Analysis): Traceback: {traceback.format_exc()}")
        return {"success": False, "message": str(e)}


@celery_app.task(name="weekly_reward_distribution_task")
def weekly_reward_distribution_task(user_ids: Optional[List[str]] = None):
    """
    A scheduled weekly task that scores the challenge participants
    and sends the winners to the payout service.
    """
    print("SCHEDULER: Kicking off the weekly reward distribution.")
    try:
        summary = run_weekly_distribution(user_ids if user_ids is not None else get_participant_ids())
        print(f"SCHEDULER: Weekly distribution finished with status '{summary['status']}'.")
        return summary
    except Exception as e:
        print(f"SCHEDULER CRITICAL: The weekly reward distribution task failed. Error: {e}")
        print(f"Traceback: {traceback.format_exc()}")
        return {"status": "error", "error": str(e)}
