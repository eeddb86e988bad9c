import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .stats import round_half_up

Classification = Literal["winner", "loser"]


class ActivityFactor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Metric name, e.g. 'steps', 'active_calories', 'active_hours'.")
    value: float = 0
    goal: Optional[float] = None
    score: Optional[float] = None
    state: Optional[str] = None
    unit: Optional[str] = None
    id: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _missing_value_is_zero(cls, v):
        return 0 if v is None else v


class ActivityLog(BaseModel):
    """One day of activity for one user, as returned by the fitness-data API."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="The log ID, NOT the user ID.")
    scoreDateTime: datetime.datetime
    type: Optional[str] = "activity"
    state: Optional[str] = None
    # Upstream score and sources are informational; a null must not reject the day
    score: Optional[float] = None
    factors: List[ActivityFactor] = Field(default_factory=list)
    dataSources: List[str] = Field(default_factory=list)
    createdAtUtc: Optional[datetime.datetime] = None
    version: Optional[float] = None

    @field_validator("factors", "dataSources", mode="before")
    @classmethod
    def _null_list_is_empty(cls, v):
        return [] if v is None else v

    def factor(self, name: str) -> Optional[ActivityFactor]:
        """Returns the last factor with the given name, if any."""
        found = None
        for factor in self.factors:
            if factor.name == name:
                found = factor
        return found

    def steps(self) -> float:
        steps_factor = self.factor("steps")
        return steps_factor.value if steps_factor is not None else 0


class UserActivityData(BaseModel):
    userId: str
    logs: List[ActivityLog] = Field(default_factory=list)
    weeklyAverageSteps: float = 0

    @classmethod
    def from_logs(cls, user_id: str, logs: List[ActivityLog]) -> "UserActivityData":
        """Builds a user's week, deriving the rounded average of daily steps."""
        if not logs:
            return cls(userId=user_id, logs=[], weeklyAverageSteps=0)
        total_steps = sum(log.steps() for log in logs)
        return cls(
            userId=user_id,
            logs=list(logs),
            weeklyAverageSteps=round_half_up(total_steps / len(logs)),
        )


class PerformanceAnalysis(BaseModel):
    userId: str
    date: datetime.date = Field(..., description="Monday (UTC) of the analysed week.")
    activityScore: float
    stepsValue: float
    stepsGoalPercentage: float
    efficiencyScore: float
    balanceScore: float
    consistencyBonus: int
    rank: int = 0
    classification: Classification
    insights: List[str] = Field(default_factory=list)


class WinnerStats(BaseModel):
    avgSteps: int = 0
    avgActivityScore: float = 0
    topInsights: List[str] = Field(default_factory=list)


class LoserStats(BaseModel):
    avgSteps: int = 0
    avgActivityScore: float = 0
    commonIssues: List[str] = Field(default_factory=list)


class WinnerLoserAnalysis(BaseModel):
    winners: List[PerformanceAnalysis] = Field(default_factory=list)
    losers: List[PerformanceAnalysis] = Field(default_factory=list)
    overallWeeklyAverageSteps: int = 0
    winnerStats: WinnerStats = Field(default_factory=WinnerStats)
    loserStats: LoserStats = Field(default_factory=LoserStats)


class AnalysisResult(BaseModel):
    analyses: List[PerformanceAnalysis] = Field(default_factory=list)
    winnerLoserAnalysis: WinnerLoserAnalysis
