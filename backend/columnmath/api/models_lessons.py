from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional

from columnmath.models.lesson import BorrowState, DemoStep, PracticeResult, Problem
from columnmath.services.problem_sampler import DIFFICULTIES, PROBLEM_KINDS

MAX_PROBLEM_COUNT = 50


class GenerateProblemsRequest(BaseModel):
    type: Any = "mixed"
    difficulty: Any = "easy"
    count: Any = 5

    @field_validator("type")
    @classmethod
    def _known_type(cls, v):
        return v if v in PROBLEM_KINDS else "mixed"

    @field_validator("difficulty")
    @classmethod
    def _known_difficulty(cls, v):
        return v if v in DIFFICULTIES else "easy"

    @field_validator("count")
    @classmethod
    def _clamp_count(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 5
        return max(1, min(MAX_PROBLEM_COUNT, int(v)))


class GenerateProblemsResponse(BaseModel):
    success: bool = True
    problems: list[Problem]


class StepListResponse(BaseModel):
    skill_tag: str
    steps: list[DemoStep]


class StepStateRequest(BaseModel):
    problem: Problem
    step: int = Field(0, ge=0)


class PracticeCheckRequest(BaseModel):
    problem: Problem
    answer: list[str]
    carries: list[str] = []
    # receiver columns clicked, in order
    borrow_clicks: list[int] = []


class PracticeCheckResponse(BaseModel):
    result: PracticeResult
    accepted_borrows: list[bool] = []
    borrow_state: Optional[BorrowState] = None


class ExplainResponse(BaseModel):
    steps: list[str] = []
    final_answer: Optional[str] = None


class SessionSummaryRequest(BaseModel):
    correct: int = Field(0, ge=0)
    total: int = Field(1, ge=1)
