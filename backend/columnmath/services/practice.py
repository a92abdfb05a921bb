"""
Practice validation for the carry and borrowing lessons.

Learner input is compared against the canonical decomposition from
columnmath.utils.digits:

  - Answer digits are compared as an exact zero-padded string, so "034"
    against an expected "34" at width 3 is accepted but "34" at width 3
    is not.
  - Carry cells ('' or '1') must match calculate_carry_positions exactly.
  - Borrow clicks are only accepted where a borrow is really needed, so a
    fully correct manual solve ends on the same top-row digits as
    calculate_borrow_adjustments.

Scores are tallied per session and mapped to a 0-5 star rating.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from typing import Optional

from columnmath.models.lesson import BorrowState, PracticeResult, Problem, SessionSummary
from columnmath.utils.digits import calculate_carry_positions, digits_of, pad_number

# (minimum score, stars), checked top-down
STAR_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (100, 5),
    (80, 4),
    (60, 3),
    (40, 2),
    (20, 1),
)

_NON_DIGIT = re.compile(r"[^0-9]")


def stars_for_score(score: int) -> int:
    for minimum, stars in STAR_THRESHOLDS:
        if score >= minimum:
            return stars
    return 0


@dataclass
class Score:
    correct: int = 0
    total: int = 0

    def record(self, is_correct: bool) -> None:
        self.total += 1
        if is_correct:
            self.correct += 1

    @property
    def percent(self) -> int:
        if not self.total:
            return 0
        # half up
        return int(self.correct / self.total * 100 + 0.5)

    def to_dict(self):
        return asdict(self)


def summarize_session(score: Score) -> SessionSummary:
    return SessionSummary(
        correct=score.correct,
        total=score.total,
        score=score.percent,
        stars=stars_for_score(score.percent),
    )


def sanitize_digit(raw: str) -> str:
    """Keep only the last digit typed; anything else becomes ''."""
    digits = _NON_DIGIT.sub("", raw or "")
    return digits[-1:]


def check_answer(inputs: list[str], answer: int, width: int) -> bool:
    return "".join(inputs) == pad_number(answer, width)


def check_carries(inputs: list[str], expected: list[bool]) -> bool:
    if len(inputs) != len(expected):
        return False
    return all(cell == ("1" if carry else "") for cell, carry in zip(inputs, expected))


def column_errors(inputs: list[str], expected: str) -> list[bool]:
    return [i >= len(inputs) or inputs[i] != ch for i, ch in enumerate(expected)]


class PracticeAttempt:
    """One problem worth of learner input. Locked once checked."""

    def __init__(self, problem: Problem, width: int):
        self.problem = problem
        self.width = width
        self.answer_inputs: list[str] = [""] * width
        self.result: Optional[PracticeResult] = None

    @property
    def submitted(self) -> bool:
        return self.result is not None

    @property
    def ready(self) -> bool:
        return all(d != "" for d in self.answer_inputs)

    def set_digit(self, column: int, raw: str) -> str:
        if self.submitted or not 0 <= column < self.width:
            return ""
        self.answer_inputs[column] = sanitize_digit(raw)
        return self.answer_inputs[column]

    def _grade(self) -> PracticeResult:
        expected = pad_number(self.problem.answer, self.width)
        answer_correct = check_answer(self.answer_inputs, self.problem.answer, self.width)
        return PracticeResult(
            is_correct=answer_correct,
            expected=expected,
            student="".join(self.answer_inputs),
            answer_correct=answer_correct,
            column_errors=column_errors(self.answer_inputs, expected),
        )

    def check(self) -> PracticeResult:
        if self.result is None:
            self.result = self._grade()
        return self.result


class CarryPractice(PracticeAttempt):
    def __init__(self, problem: Problem, width: int):
        super().__init__(problem, width)
        self.carry_inputs: list[str] = [""] * width
        self.expected_carries = calculate_carry_positions(problem.num1, problem.num2, width)

    def set_carry(self, column: int, value: str) -> str:
        if self.submitted or not 0 <= column < self.width:
            return ""
        self.carry_inputs[column] = "1" if "1" in (value or "") else ""
        return self.carry_inputs[column]

    def _grade(self) -> PracticeResult:
        base = super()._grade()
        carries_correct = check_carries(self.carry_inputs, self.expected_carries)
        return base.model_copy(update={
            "is_correct": base.answer_correct and carries_correct,
            "carries_correct": carries_correct,
        })


class BorrowPractice(PracticeAttempt):
    def __init__(self, problem: Problem, width: int):
        super().__init__(problem, width)
        self.original_digits = digits_of(problem.num1, width)
        self.bottom_digits = digits_of(problem.num2, width)
        self.display_digits = list(self.original_digits)
        self.borrowed = [False] * width
        self.received = [False] * width

    def _needs_unit(self, column: int) -> bool:
        # A column needs ten more when its digit is too small, or when it is a
        # zero standing between a needy column and the next digit that can give.
        if column >= self.width or self.received[column]:
            return False
        if self.display_digits[column] < self.bottom_digits[column]:
            return True
        return self.display_digits[column] == 0 and self._needs_unit(column + 1)

    def can_borrow(self, receiver: int) -> bool:
        """Allowed when the left neighbour is nonzero and the column is smaller
        than its bottom digit, or is a zero that must pass a unit further right."""
        if self.submitted or not 0 < receiver < self.width:
            return False
        giver = receiver - 1
        if self.display_digits[giver] <= 0:
            return False
        return self._needs_unit(receiver)

    def borrow_click(self, receiver: int) -> bool:
        """Move one unit from column receiver-1 into receiver. False when refused."""
        if not self.can_borrow(receiver):
            return False
        giver = receiver - 1
        self.display_digits[giver] -= 1
        self.display_digits[receiver] += 10
        self.borrowed[giver] = True
        self.received[receiver] = True
        return True

    @property
    def borrow_state(self) -> BorrowState:
        return BorrowState(
            display_digits=list(self.display_digits),
            original_digits=list(self.original_digits),
            borrowed=list(self.borrowed),
            received_borrow=list(self.received),
        )
