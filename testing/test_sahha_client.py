import datetime

import pytest
import requests

from stepwise import sahha_client
from stepwise.sahha_client import SahhaApiError, SahhaClient, get_current_week_date_range


def _log_json(log_id, day, steps):
    return {
        "id": log_id,
        "type": "activity",
        "state": "medium",
        "score": 0.61,
        "scoreDateTime": f"2025-06-{9 + day:02d}T00:00:00+00:00",
        "createdAtUtc": "2025-06-16T02:00:00Z",
        "dataSources": ["step_count"],
        "version": 1.0,
        "unexpectedUpstreamField": "ignored",
        "factors": [
            {"id": "f1", "name": "steps", "value": steps, "goal": 7500, "score": 0.8,
             "state": "high", "unit": "count"},
            {"id": "f2", "name": "active_calories", "value": 300, "goal": 500, "score": 0.5,
             "state": "medium", "unit": "kcal"},
        ],
    }


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def client():
    return SahhaClient(base_url="https://sahha.test/api/v1/", auth_token="secret-token", timeout=5, max_workers=4)


@pytest.fixture
def fake_get(monkeypatch):
    """Routes requests.get by user id; a registered exception is raised instead of answered."""
    responses = {}
    calls = []

    def _get(url, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        user_id = url.rsplit("/", 1)[-1]
        answer = responses[user_id]
        if isinstance(answer, Exception):
            raise answer
        return answer

    monkeypatch.setattr(sahha_client.requests, "get", _get)
    return responses, calls


def test_fetch_sends_account_token_and_week_range(client, fake_get):
    responses, calls = fake_get
    responses["user-1"] = FakeResponse([_log_json("l1", 0, 8000)])

    logs = client.fetch_user_activity_logs("user-1", "2025-06-09T00:00:00.000Z", "2025-06-15T23:59:59.999Z")

    assert [log.id for log in logs] == ["l1"]
    assert logs[0].steps() == 8000
    assert calls[0]["url"] == "https://sahha.test/api/v1/profile/score/user-1"
    assert calls[0]["params"] == {
        "startDateTime": "2025-06-09T00:00:00.000Z",
        "endDateTime": "2025-06-15T23:59:59.999Z",
        "types": "activity",
    }
    assert calls[0]["headers"]["Authorization"] == "account secret-token"
    assert calls[0]["timeout"] == 5


def test_fetch_accepts_logs_wrapped_in_an_object(client, fake_get):
    responses, _ = fake_get
    responses["user-1"] = FakeResponse({"logs": [_log_json("l1", 0, 8000), _log_json("l2", 1, 6000)]})
    assert len(client.fetch_user_activity_logs("user-1", "s", "e")) == 2


def test_fetch_treats_unknown_shapes_as_no_logs(client, fake_get):
    responses, _ = fake_get
    responses["user-1"] = FakeResponse({"data": "nothing here"})
    assert client.fetch_user_activity_logs("user-1", "s", "e") == []


def test_fetch_raises_on_http_error(client, fake_get):
    responses, _ = fake_get
    responses["user-1"] = FakeResponse({"message": "Unauthorized"}, status_code=401)
    with pytest.raises(SahhaApiError):
        client.fetch_user_activity_logs("user-1", "s", "e")


def test_fetch_raises_on_invalid_json(client, fake_get):
    responses, _ = fake_get
    responses["user-1"] = FakeResponse(ValueError("Expecting value"))
    with pytest.raises(SahhaApiError):
        client.fetch_user_activity_logs("user-1", "s", "e")


def test_fetch_requires_a_token(monkeypatch):
    monkeypatch.delenv("SAHHA_ACCOUNT_TOKEN", raising=False)
    with pytest.raises(SahhaApiError):
        SahhaClient(base_url="https://sahha.test").fetch_user_activity_logs("user-1", "s", "e")


def test_fetch_many_keeps_order_and_degrades_failed_users(client, fake_get):
    responses, _ = fake_get
    responses["user-1"] = FakeResponse([_log_json("a", 0, 7000), _log_json("b", 1, 8001)])
    responses["user-2"] = requests.ConnectionError("connection reset")
    responses["user-3"] = FakeResponse([])

    users = client.fetch_multiple_users_activity_logs(["user-1", "user-2", "user-3"], "s", "e")

    assert [u.userId for u in users] == ["user-1", "user-2", "user-3"]
    assert users[0].weeklyAverageSteps == 7501
    assert users[1].logs == []
    assert users[1].weeklyAverageSteps == 0
    assert users[2].weeklyAverageSteps == 0


def test_fetch_many_with_no_users(client):
    assert client.fetch_multiple_users_activity_logs([], "s", "e") == []


@pytest.mark.parametrize("now", [
    datetime.datetime(2025, 6, 9, 0, 0, tzinfo=datetime.timezone.utc),
    datetime.datetime(2025, 6, 11, 15, 30, tzinfo=datetime.timezone.utc),
    datetime.datetime(2025, 6, 15, 23, 59, tzinfo=datetime.timezone.utc),
])
def test_current_week_range_runs_monday_to_sunday(now):
    assert get_current_week_date_range(now) == ("2025-06-09T00:00:00.000Z", "2025-06-15T23:59:59.999Z")


def test_null_informational_fields_do_not_drop_the_user(client, fake_get):
    responses, _ = fake_get
    day_one = _log_json("a", 0, 9000)
    day_one["factors"].append({"name": "intense_activity_duration", "value": None, "goal": None})
    day_two = _log_json("b", 1, 9000)
    day_two.update(score=None, type=None, dataSources=None)
    responses["user-1"] = FakeResponse([day_one, day_two])

    user = client.fetch_multiple_users_activity_logs(["user-1"], "s", "e")[0]

    assert [log.id for log in user.logs] == ["a", "b"]
    assert user.weeklyAverageSteps == 9000
    assert user.logs[0].factor("intense_activity_duration").value == 0
    assert user.logs[1].score is None
    assert user.logs[1].dataSources == []


def test_zero_workers_from_env_still_fetches(monkeypatch, fake_get):
    responses, _ = fake_get
    responses["user-1"] = FakeResponse([_log_json("a", 0, 8000)])
    monkeypatch.setenv("SAHHA_MAX_WORKERS", "0")

    client = SahhaClient(base_url="https://sahha.test", auth_token="secret-token")

    assert client.max_workers == 1
    assert client.fetch_multiple_users_activity_logs(["user-1"], "s", "e")[0].weeklyAverageSteps == 8000
