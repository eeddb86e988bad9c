import uvicorn
import os
import traceback
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List
from stepwise.activity_analysis import ActivityAnalysisService
from stepwise.classification import EmptyCohortError
from stepwise.models import UserActivityData
from stepwise.rewards import run_weekly_distribution
from stepwise.weekly_aggregator import analyze_users_activity


class ActivityAnalysisRequestModel(BaseModel):
    userIds: List[str] = Field(..., description="Sahha profile IDs of the challenge participants.")

class ScoreRequestModel(BaseModel):
    usersData: List[UserActivityData] = Field(..., description="Already-fetched weekly activity, one entry per user.")

analysis_service = None


def get_analysis_service() -> ActivityAnalysisService:
    global analysis_service
    if analysis_service is None:
        analysis_service = ActivityAnalysisService()
    return analysis_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    print("Application startup: Initializing activity analysis service...")
    try:
        get_analysis_service()
        print("Activity analysis service ready.")
    except Exception as e:
        print(f"CRITICAL ERROR during startup: {e}")
        print(f"Traceback: {traceback.format_exc()}")
        raise

    yield

    print("Application shutdown.")

# --- App Initialization ---
app = FastAPI(
    title="StepWise Activity Scoring Service",
    version="1.0.0",
    description="""
    Weekly activity scoring for the StepWise steps challenge.
    - Use `/api/activity-analysis` to fetch this week's Sahha logs and rank the given users.
    - Use `/api/activity-analysis/score` to rank activity data you already have.
    """,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _error_response(e: Exception, status_code: int = 500) -> JSONResponse:
    content = {"success": False, "message": "Internal server error"}
    if os.getenv("APP_ENV") == "development":
        content["error"] = str(e)
    return JSONResponse(status_code=status_code, content=content)


def _empty_user_ids_response() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid userIds data. Expected a non-empty array of user IDs."}
    )


@app.get("/health", tags=["System"])
def health_check():
    """Check if the API service is running."""
    return {"status": "ok", "service_initialized": analysis_service is not None}


@app.post("/api/activity-analysis", tags=["Activity Analysis"])
def run_activity_analysis(request: ActivityAnalysisRequestModel,
                          service: ActivityAnalysisService = Depends(get_analysis_service)):
    """
    Fetches the current week's activity for every user and returns the ranked
    analyses together with the winner/loser breakdown.
    """
    if not request.userIds:
        return _empty_user_ids_response()

    print(f"API: Running activity analysis for {len(request.userIds)} user(s).")
    try:
        result = service.analyze_users_activity(request.userIds)
        return {"success": True, "data": result.model_dump(mode="json")}
    except Exception as e:
        print(f"ERROR in run_activity_analysis: {e}")
        print(f"Traceback: {traceback.format_exc()}")
        return _error_response(e)


@app.post("/api/activity-analysis/score", tags=["Activity Analysis"])
def score_activity_data(request: ScoreRequestModel,
                        service: ActivityAnalysisService = Depends(get_analysis_service)):
    """Ranks and classifies activity data supplied by the caller, without calling Sahha."""
    print(f"API: Scoring pre-fetched activity for {len(request.usersData)} user(s).")
    try:
        result = analyze_users_activity(request.usersData, service.config)
        return {"success": True, "data": result.model_dump(mode="json")}
    except EmptyCohortError as e:
        return JSONResponse(status_code=400, content={"success": False, "message": str(e)})
    except Exception as e:
        print(f"ERROR in score_activity_data: {e}")
        print(f"Traceback: {traceback.format_exc()}")
        return _error_response(e)


@app.post("/admin/run-weekly-distribution", tags=["Admin"])
def run_weekly_reward_distribution(request: ActivityAnalysisRequestModel,
                                   service: ActivityAnalysisService = Depends(get_analysis_service)):
    """
    Manually trigger this week's reward distribution:
    1. Fetch and score the given participants
    2. Select the winners (weekly average steps at or above the threshold)
    3. Send the winners and their points to the payout service
    """
    if not request.userIds:
        return _empty_user_ids_response()

    summary = run_weekly_distribution(request.userIds, service=service)
    if summary["status"] == "error":
        return JSONResponse(status_code=500, content=summary)
    return summary


if __name__ == "__main__":
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
