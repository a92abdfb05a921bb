import logging
import random
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from columnmath.api.models_lessons import (
    ExplainResponse,
    PracticeCheckRequest,
    PracticeCheckResponse,
    StepListResponse,
    StepStateRequest,
)
from columnmath.models.lesson import DemoSnapshot, Problem
from columnmath.services.practice import BorrowPractice, CarryPractice
from columnmath.services.telemetry import instrument
from columnmath.skills.base import SkillContract
from columnmath.skills.registry import get_skill

logger = logging.getLogger("columnmath.lessons")
router = APIRouter(prefix="/api/lessons", tags=["lessons"])


def _contract(skill_tag: str) -> SkillContract:
    contract = get_skill(skill_tag)
    if contract is None:
        raise HTTPException(status_code=404, detail=f"Unknown lesson '{skill_tag}'")
    return contract


def _checked_problem(contract: SkillContract, problem: Problem) -> Problem:
    issues = contract.validate(problem)
    if issues:
        logger.info("%s rejected problem %s: %s", contract.skill_tag, problem, issues)
        raise HTTPException(
            status_code=422,
            detail={
                "message": f"Problem does not fit lesson '{contract.skill_tag}'",
                "issues": issues,
            },
        )
    return problem


@router.get("/{skill_tag}/steps", response_model=StepListResponse)
@instrument(route="/api/lessons/steps", version="v1")
def list_steps(skill_tag: str):
    contract = _contract(skill_tag)
    return StepListResponse(skill_tag=contract.skill_tag, steps=list(contract.demo_steps))


@router.post("/{skill_tag}/problem", response_model=Problem)
@instrument(route="/api/lessons/problem", version="v1")
def new_problem(skill_tag: str, seed: Optional[int] = Query(None)):
    contract = _contract(skill_tag)
    return contract.build_variant(random.Random(seed))


@router.post("/{skill_tag}/state", response_model=DemoSnapshot)
@instrument(route="/api/lessons/state", version="v1")
def step_state(skill_tag: str, payload: StepStateRequest):
    contract = _contract(skill_tag)
    problem = _checked_problem(contract, payload.problem)
    if payload.step > contract.last_step:
        raise HTTPException(
            status_code=422,
            detail=f"Step must be between 0 and {contract.last_step}",
        )
    return contract.compute_state_for_step(problem, payload.step)


@router.post("/{skill_tag}/explain", response_model=ExplainResponse)
@instrument(route="/api/lessons/explain", version="v1")
def explain(skill_tag: str, problem: Problem):
    contract = _contract(skill_tag)
    return contract.explain(_checked_problem(contract, problem))


@router.post("/{skill_tag}/check", response_model=PracticeCheckResponse)
@instrument(route="/api/lessons/check", version="v1")
def check_practice(skill_tag: str, payload: PracticeCheckRequest):
    contract = _contract(skill_tag)
    problem = _checked_problem(contract, payload.problem)
    attempt = contract.new_attempt(problem)

    if len(payload.answer) != attempt.width:
        raise HTTPException(
            status_code=422,
            detail=f"Expected {attempt.width} answer digits, got {len(payload.answer)}",
        )

    accepted = []
    if isinstance(attempt, BorrowPractice):
        accepted = [attempt.borrow_click(column) for column in payload.borrow_clicks]
    if isinstance(attempt, CarryPractice):
        for column, value in enumerate(payload.carries[: attempt.width]):
            attempt.set_carry(column, value)
    for column, raw in enumerate(payload.answer):
        attempt.set_digit(column, raw)

    result = attempt.check()
    logger.debug("%s check %s → %s", skill_tag, result.student, result.is_correct)
    return PracticeCheckResponse(
        result=result,
        accepted_borrows=accepted,
        borrow_state=attempt.borrow_state if isinstance(attempt, BorrowPractice) else None,
    )
