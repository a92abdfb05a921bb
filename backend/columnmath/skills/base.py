"""Base skill contract for the column arithmetic lessons.

Every lesson (CarryOver, Borrowing) subclasses SkillContract and provides
its demo timeline plus the pure step → snapshot function that drives it.
"""

import random

from columnmath.models.lesson import DemoSnapshot, DemoStep, Problem
from columnmath.services.practice import PracticeAttempt


class SkillContract:
    skill_tag: str = ""
    operator: str = ""
    demo_steps: tuple[DemoStep, ...] = ()

    def build_variant(self, rng: random.Random) -> Problem:
        raise NotImplementedError

    def accepts(self, problem: Problem) -> bool:
        return problem.operator == self.operator

    def expected_answer(self, problem: Problem) -> int:
        raise NotImplementedError

    def validate(self, problem: Problem) -> list[str]:
        """Issues that keep this lesson from teaching `problem`; empty when fine."""
        if not self.accepts(problem):
            return ["operator_mismatch"]
        if problem.num1 < 0 or problem.num2 < 0:
            return ["negative_operand"]
        issues = []
        if problem.answer != self.expected_answer(problem):
            issues.append("answer_mismatch")
        return issues

    def width_for(self, problem: Problem) -> int:
        raise NotImplementedError

    @property
    def last_step(self) -> int:
        return len(self.demo_steps) - 1

    def clamp_step(self, step: int) -> int:
        return max(0, min(step, self.last_step))

    def compute_state_for_step(self, problem: Problem, step: int) -> DemoSnapshot:
        """
        Rebuild the whole visible state for `step` from nothing.

        Must be a pure function of (problem, step): scrubbing 3 → 1 → 3
        has to land on exactly the snapshot a direct jump to 3 gives.
        """
        raise NotImplementedError

    def explain(self, problem: Problem) -> dict:
        """
        Deterministic explanation built from the demo narration.
        Returns:
        {
            "steps": [str, ...],
            "final_answer": str
        }
        """
        lines = []
        for step in range(1, self.last_step):
            narration = self.compute_state_for_step(problem, step).narration
            if narration:
                lines.append(narration)
        return {
            "steps": lines,
            "final_answer": str(problem.answer),
        }

    def new_attempt(self, problem: Problem) -> PracticeAttempt:
        return PracticeAttempt(problem, self.width_for(problem))
