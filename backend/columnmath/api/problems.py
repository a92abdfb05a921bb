import logging
import random

from fastapi import APIRouter

from columnmath.api.models_lessons import (
    GenerateProblemsRequest,
    GenerateProblemsResponse,
    SessionSummaryRequest,
)
from columnmath.models.lesson import SessionSummary
from columnmath.services.practice import Score, summarize_session
from columnmath.services.problem_sampler import generate_problems
from columnmath.services.telemetry import instrument

logger = logging.getLogger("columnmath.problems")
router = APIRouter(prefix="/api", tags=["problems"])


@router.post("/problems/generate", response_model=GenerateProblemsResponse)
@instrument(route="/api/problems/generate", version="v1")
def generate(payload: GenerateProblemsRequest):
    problems = generate_problems(payload.type, payload.count, payload.difficulty, random.Random())
    return GenerateProblemsResponse(problems=problems)


@router.post("/practice/summary", response_model=SessionSummary)
@instrument(route="/api/practice/summary", version="v1")
def practice_summary(payload: SessionSummaryRequest):
    # correct can't exceed total
    score = Score(correct=min(payload.correct, payload.total), total=payload.total)
    return summarize_session(score)
