"""Column addition with carry: SkillContract implementation."""

import math
import random

from .base import SkillContract
from columnmath.models.lesson import DemoSnapshot, DemoStep, Problem, SumVisualization
from columnmath.services.practice import CarryPractice
from columnmath.services.problem_sampler import generate_carry_problem
from columnmath.utils.digits import (
    calculate_carry_positions,
    carry_width,
    digits_of,
    pad_number,
)

PLACE_NAMES = ("ones", "tens", "hundreds", "thousands", "ten thousands")

CARRY_STEPS: tuple[DemoStep, ...] = (
    DemoStep(index=0, label="Start", description="Look at the problem",
             narration="Let's look at the problem."),
    DemoStep(index=1, label="Ones", description="Add the ones column",
             narration="First, add the ones."),
    DemoStep(index=2, label="Carry", description="Carry the 1 if needed",
             narration="Do we need to carry?"),
    DemoStep(index=3, label="Tens", description="Add the tens column",
             narration="Now add the tens."),
    DemoStep(index=4, label="Carry", description="Carry the 1 if needed",
             narration="Do we need to carry?"),
    DemoStep(index=5, label="Hundreds", description="Add the hundreds column",
             narration="Now add the hundreds."),
    DemoStep(index=6, label="Done", description="Final answer!",
             narration="That's the answer!"),
)


def _place_name(width: int, column: int) -> str:
    position = width - 1 - column
    return PLACE_NAMES[position] if position < len(PLACE_NAMES) else "next"


class CarryOverContract(SkillContract):
    skill_tag = "carry_over"
    operator = "+"
    demo_steps = CARRY_STEPS

    def build_variant(self, rng: random.Random) -> Problem:
        return generate_carry_problem(rng)

    def width_for(self, problem: Problem) -> int:
        return carry_width(problem.num1, problem.num2, problem.answer)

    def expected_answer(self, problem: Problem) -> int:
        return problem.num1 + problem.num2

    def compute_state_for_step(self, problem: Problem, step: int) -> DemoSnapshot:
        step = self.clamp_step(step)
        width = self.width_for(problem)
        carries = calculate_carry_positions(problem.num1, problem.num2, width)
        answer_str = pad_number(problem.answer, width)
        top = digits_of(problem.num1, width)
        bottom = digits_of(problem.num2, width)

        visible_carries = [False] * width
        answer_digits = [""] * width
        sum_viz = None
        narration = f"Let's add {problem.num1} and {problem.num2}."
        carry_in = 0

        # Odd steps add a column, even steps move its carry; column by column from the right.
        for s in range(1, step + 1):
            column = width - math.ceil(s / 2)
            if column < 0:
                continue
            place = _place_name(width, column)

            if s % 2 == 1:
                d1, d2 = top[column], bottom[column]
                total = d1 + d2 + carry_in
                answer_digits[column] = answer_str[column]
                if s == step:
                    sum_viz = SumVisualization(
                        digit1=d1, digit2=d2, carry=carry_in, show_split=total >= 10,
                    )
                    extra = " plus the carried 1" if carry_in else ""
                    narration = f"Add the {place}: {d1} plus {d2}{extra} is {total}."
            else:
                if column > 0 and carries[column - 1]:
                    visible_carries[column - 1] = True
                    carry_in = 1
                    if s == step:
                        next_place = _place_name(width, column - 1)
                        narration = f"That's more than 9, so carry the 1 to the {next_place}."
                else:
                    carry_in = 0
                    if s == step:
                        narration = "No carry this time."

        if step == self.last_step:
            # Done shows the whole result, including a leading digit made only by a carry.
            visible_carries = list(carries)
            answer_digits = list(answer_str)
            sum_viz = None
            narration = f"{problem.num1} plus {problem.num2} is {problem.answer}!"

        return DemoSnapshot(
            skill_tag=self.skill_tag,
            step=step,
            label=self.demo_steps[step].label,
            narration=narration,
            width=width,
            answer_digits=answer_digits,
            carries=visible_carries,
            sum_visualization=sum_viz,
        )

    def new_attempt(self, problem: Problem) -> CarryPractice:
        return CarryPractice(problem, self.width_for(problem))
