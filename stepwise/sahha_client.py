import datetime
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

from .models import ActivityLog, UserActivityData

DEFAULT_BASE_URL = "https://sandbox-api.sahha.ai/api/v1"


class SahhaApiError(Exception):
    """Raised when activity logs for a user cannot be fetched or parsed."""


def _iso_utc(moment: datetime.datetime) -> str:
    return moment.astimezone(datetime.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_current_week_date_range(now: Optional[datetime.datetime] = None) -> Tuple[str, str]:
    """Monday 00:00:00.000 to Sunday 23:59:59.999 (UTC) of the week containing `now`."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    now = now.astimezone(datetime.timezone.utc)

    start_of_week = (now - datetime.timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
    end_of_week = start_of_week + datetime.timedelta(days=7) - datetime.timedelta(milliseconds=1)
    return _iso_utc(start_of_week), _iso_utc(end_of_week)


class SahhaClient:
    def __init__(self, base_url: Optional[str] = None, auth_token: Optional[str] = None,
                 timeout: Optional[float] = None, max_workers: Optional[int] = None):
        """
        Initializes the client from arguments, falling back to environment variables.
        """
        self.base_url = (base_url or os.getenv("SAHHA_API_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.auth_token = auth_token or os.getenv("SAHHA_ACCOUNT_TOKEN")
        self.timeout = timeout or float(os.getenv("SAHHA_TIMEOUT_SECONDS", "15"))
        # ThreadPoolExecutor rejects 0 workers
        self.max_workers = max(1, max_workers or int(os.getenv("SAHHA_MAX_WORKERS", "8")))
        print(f"SahhaClient: Initialized for {self.base_url}")

    def _headers(self) -> Dict[str, str]:
        if not self.auth_token:
            raise SahhaApiError("SAHHA_ACCOUNT_TOKEN is not set; cannot authenticate with the Sahha API.")
        return {
            "Authorization": f"account {self.auth_token}",
            "Content-Type": "application/json",
        }

    def fetch_user_activity_logs(self, user_id: str, start_date_time: str, end_date_time: str) -> List[ActivityLog]:
        """
        Fetch activity logs for a specific user within a date range.

        The API answers either with a bare list of logs or with an object
        holding them under 'logs'. Any other shape is treated as no logs.
        """
        url = f"{self.base_url}/profile/score/{user_id}"
        params = {
            "startDateTime": start_date_time,
            "endDateTime": end_date_time,
            "types": "activity",
        }
        try:
            response = requests.get(url, params=params, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise SahhaApiError(f"Request for user {user_id} failed: {e}") from e
        except ValueError as e:
            raise SahhaApiError(f"Response for user {user_id} is not valid JSON: {e}") from e

        if isinstance(data, dict):
            data = data.get("logs") or []
        if not isinstance(data, list):
            return []

        try:
            return [ActivityLog.model_validate(item) for item in data]
        except ValidationError as e:
            raise SahhaApiError(f"Malformed activity log for user {user_id}: {e}") from e

    def _fetch_user_week(self, user_id: str, start_date_time: str, end_date_time: str) -> UserActivityData:
        try:
            logs = self.fetch_user_activity_logs(user_id, start_date_time, end_date_time)
        except SahhaApiError as e:
            # One unreachable user must not sink the whole batch
            print(f"SahhaClient ERROR: Failed to fetch data for user {user_id}. Details: {e}")
            return UserActivityData(userId=user_id, logs=[], weeklyAverageSteps=0)
        return UserActivityData.from_logs(user_id, logs)

    def fetch_multiple_users_activity_logs(self, user_ids: List[str], start_date_time: str,
                                           end_date_time: str) -> List[UserActivityData]:
        """
        Fetch activity logs for several users concurrently, one request each.

        Results come back in the order of `user_ids`. A user whose fetch fails
        is returned with no logs and a weekly average of 0.
        """
        if not user_ids:
            return []
        print(f"SahhaClient: Fetching activity for {len(user_ids)} user(s) between {start_date_time} and {end_date_time}")
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(user_ids))) as executor:
            return list(executor.map(
                lambda user_id: self._fetch_user_week(user_id, start_date_time, end_date_time),
                user_ids,
            ))
