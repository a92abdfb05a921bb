"""
Problem sampler: rejection sampling with a bounded budget.

Carry and borrow lessons need operand pairs that actually exercise a carry
or a borrow. Each generator draws until the predicate holds or the attempt
budget runs out, then falls back to a fixed pair that is known to qualify.
The generators never fail and never return None.
"""

import logging
import random
from typing import Literal, Optional

from columnmath.core.config import get_settings
from columnmath.models.lesson import Problem
from columnmath.utils.digits import needs_borrow, needs_carry

logger = logging.getLogger("columnmath.problem_sampler")

ProblemKind = Literal["addition", "subtraction", "multiplication", "division", "mixed"]
Difficulty = Literal["easy", "medium", "hard"]

PROBLEM_KINDS: tuple[str, ...] = ("addition", "subtraction", "multiplication", "division", "mixed")
DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")

CARRY_FALLBACK = (156, 278)   # 6+8 carries, 5+7+1 carries
BORROW_FALLBACK = (423, 187)  # ones and tens both borrow

DIFFICULTY_RANGES: dict[str, tuple[int, int]] = {
    "easy": (1, 10),
    "medium": (10, 100),
    "hard": (100, 1000),
}


def _budget(max_attempts: Optional[int]) -> int:
    if max_attempts is not None:
        return max_attempts
    return get_settings().max_sample_attempts


def addition(num1: int, num2: int) -> Problem:
    return Problem(num1=num1, num2=num2, answer=num1 + num2, operator="+")


def subtraction(num1: int, num2: int) -> Problem:
    return Problem(num1=num1, num2=num2, answer=num1 - num2, operator="−")


def generate_carry_problem(rng: random.Random, max_attempts: Optional[int] = None) -> Problem:
    """3-digit addition with at least one carry."""
    for _ in range(_budget(max_attempts)):
        a = rng.randint(100, 799)
        b = rng.randint(100, 799)
        if needs_carry(a, b):
            return addition(a, b)

    logger.info("carry sampling budget exhausted, using fallback %s", CARRY_FALLBACK)
    return addition(*CARRY_FALLBACK)


def generate_borrow_problem(rng: random.Random, max_attempts: Optional[int] = None) -> Problem:
    """3-digit subtraction with at least one borrow and a positive result."""
    for _ in range(_budget(max_attempts)):
        a = rng.randint(200, 599)
        b = rng.randint(100, a - 100)
        if needs_borrow(a, b) and a > b:
            return subtraction(a, b)

    logger.info("borrow sampling budget exhausted, using fallback %s", BORROW_FALLBACK)
    return subtraction(*BORROW_FALLBACK)


# ── general practice generators ──────────────────────────────────────────────

def _range_for(difficulty: str) -> tuple[int, int]:
    return DIFFICULTY_RANGES.get(difficulty, DIFFICULTY_RANGES["easy"])


def generate_addition_problem(rng: random.Random, difficulty: Difficulty) -> Problem:
    lo, hi = _range_for(difficulty)
    return addition(rng.randint(lo, hi), rng.randint(lo, hi))


def generate_subtraction_problem(rng: random.Random, difficulty: Difficulty) -> Problem:
    lo, hi = _range_for(difficulty)
    a, b = rng.randint(lo, hi), rng.randint(lo, hi)
    if b > a:
        a, b = b, a
    return subtraction(a, b)


def generate_multiplication_problem(rng: random.Random, difficulty: Difficulty) -> Problem:
    # Tables stop at 12 whatever the difficulty.
    a, b = rng.randint(1, 12), rng.randint(1, 12)
    return Problem(num1=a, num2=b, answer=a * b, operator="×")


def generate_division_problem(rng: random.Random, difficulty: Difficulty) -> Problem:
    divisor = rng.randint(1, 12)
    quotient = rng.randint(1, 12)
    return Problem(num1=divisor * quotient, num2=divisor, answer=quotient, operator="÷")


_GENERATORS = {
    "addition": generate_addition_problem,
    "subtraction": generate_subtraction_problem,
    "multiplication": generate_multiplication_problem,
    "division": generate_division_problem,
}


def generate_problem(kind: ProblemKind, difficulty: Difficulty, rng: random.Random) -> Problem:
    if kind == "mixed":
        kind = rng.choice(list(_GENERATORS))
    generator = _GENERATORS.get(kind, generate_addition_problem)
    return generator(rng, difficulty)


def generate_problems(
    kind: ProblemKind, count: int, difficulty: Difficulty, rng: random.Random
) -> list[Problem]:
    return [generate_problem(kind, difficulty, rng) for _ in range(count)]
