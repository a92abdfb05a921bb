"""Column subtraction with borrow: SkillContract implementation."""

import random
from typing import Optional

from .base import SkillContract
from columnmath.models.lesson import (
    BorrowState,
    BorrowVisualization,
    DemoSnapshot,
    DemoStep,
    Problem,
)
from columnmath.services.practice import BorrowPractice
from columnmath.services.problem_sampler import generate_borrow_problem
from columnmath.utils.digits import borrow_into, digits_of, pad_number

BORROW_WIDTH = 3
ONES, TENS, HUNDREDS = 2, 1, 0
PLACE_NAMES = {TENS: ("ten", "tens"), HUNDREDS: ("hundred", "hundreds")}

BORROW_STEPS: tuple[DemoStep, ...] = (
    DemoStep(index=0, label="Start", description="Look at the problem",
             narration="Let's look at the problem."),
    DemoStep(index=1, label="Check", description="Can we subtract the ones?",
             narration="Can we take away the ones?"),
    DemoStep(index=2, label="Borrow", description="Borrow from the tens",
             narration="Borrow from the tens if we need to."),
    DemoStep(index=3, label="Ones", description="Subtract the ones",
             narration="Subtract the ones."),
    DemoStep(index=4, label="Tens", description="Subtract the tens",
             narration="Subtract the tens."),
    DemoStep(index=5, label="Hundreds", description="Subtract the hundreds",
             narration="Subtract the hundreds."),
    DemoStep(index=6, label="Done", description="Final answer!",
             narration="That's the answer!"),
)


class _BorrowTrack:
    """Top row plus the give/receive marks of the borrows applied so far."""

    def __init__(self, digits: list[int]):
        self.digits = list(digits)
        self.borrowed = [False] * len(digits)
        self.received = [False] * len(digits)

    def borrow(self, receiver: int) -> Optional[int]:
        """Apply one borrow into receiver and return the giving column."""
        step = borrow_into(self.digits, receiver)
        if step is None:
            return None
        self.digits, giver = step
        for k in range(giver, receiver):
            self.borrowed[k] = True
            self.received[k + 1] = True
        return giver


class BorrowingContract(SkillContract):
    skill_tag = "borrowing"
    operator = "−"
    demo_steps = BORROW_STEPS

    def build_variant(self, rng: random.Random) -> Problem:
        return generate_borrow_problem(rng)

    def width_for(self, problem: Problem) -> int:
        return BORROW_WIDTH

    def expected_answer(self, problem: Problem) -> int:
        return problem.num1 - problem.num2

    def validate(self, problem: Problem) -> list[str]:
        issues = super().validate(problem)
        if not self.accepts(problem) or min(problem.num1, problem.num2) < 0:
            return issues
        # three columns, top row never below the bottom row
        if problem.num1 < problem.num2:
            issues.append("num1_below_num2")
        if problem.num1 >= 10 ** BORROW_WIDTH:
            issues.append("too_many_digits")
        return issues

    def compute_state_for_step(self, problem: Problem, step: int) -> DemoSnapshot:
        step = self.clamp_step(step)
        width = BORROW_WIDTH
        original = digits_of(problem.num1, width)
        bottom = digits_of(problem.num2, width)
        answer_str = pad_number(problem.answer, width)

        # Replaying the borrows in column order yields calculate_borrow_adjustments.
        track = _BorrowTrack(original)
        ones_giver = None
        tens_borrowed = False
        answer_digits = [""] * width
        borrow_viz = None
        narration = f"Let's take {problem.num2} away from {problem.num1}."

        if step >= 1:
            top_d, bottom_d = original[ONES], bottom[ONES]
            if step == 1:
                borrow_viz = BorrowVisualization(
                    top_digit=top_d, bottom_digit=bottom_d, show_borrow=False,
                )
                if top_d < bottom_d:
                    narration = f"Can we take {bottom_d} from {top_d}? No, {top_d} is too small."
                else:
                    narration = f"Can we take {bottom_d} from {top_d}? Yes!"

        if step >= 2:
            if original[ONES] < bottom[ONES]:
                ones_giver = track.borrow(ONES)
            if step == 2:
                if ones_giver is not None:
                    borrow_viz = BorrowVisualization(
                        top_digit=original[ONES], bottom_digit=bottom[ONES], show_borrow=True,
                    )
                    unit, place = PLACE_NAMES[ones_giver]
                    narration = f"Borrow 1 {unit} from the {place}. "
                    if ones_giver != TENS:
                        narration = "The tens are 0, so " + narration[0].lower() + narration[1:]
                    narration += f"The {original[ONES]} becomes {track.digits[ONES]}."
                else:
                    narration = "No need to borrow for the ones."

        if step >= 3:
            tens_before = track.digits[TENS]
            if tens_before < bottom[TENS]:
                tens_borrowed = track.borrow(TENS) is not None
            answer_digits[ONES] = answer_str[ONES]
            if step == 3:
                narration = self._take_away(track.digits[ONES], bottom[ONES], answer_str[ONES])
                if tens_borrowed:
                    narration += (
                        f" The tens must borrow too, so the {tens_before} "
                        f"becomes {track.digits[TENS]}."
                    )

        if step >= 4:
            answer_digits[TENS] = answer_str[TENS]
            if step == 4:
                narration = self._take_away(track.digits[TENS], bottom[TENS], answer_str[TENS])

        if step >= 5:
            answer_digits[HUNDREDS] = answer_str[HUNDREDS]
            if step == 5:
                narration = self._take_away(track.digits[HUNDREDS], bottom[HUNDREDS],
                                            answer_str[HUNDREDS])

        if step >= 6:
            narration = f"{problem.num1} take away {problem.num2} is {problem.answer}!"

        return DemoSnapshot(
            skill_tag=self.skill_tag,
            step=step,
            label=self.demo_steps[step].label,
            narration=narration,
            width=width,
            answer_digits=answer_digits,
            borrow_state=BorrowState(
                display_digits=track.digits,
                original_digits=original,
                borrowed=track.borrowed,
                received_borrow=track.received,
            ),
            borrow_visualization=borrow_viz,
        )

    @staticmethod
    def _take_away(top_digit: int, bottom_digit: int, result: str) -> str:
        return f"{top_digit} take away {bottom_digit} is {result}."

    def new_attempt(self, problem: Problem) -> BorrowPractice:
        return BorrowPractice(problem, BORROW_WIDTH)
