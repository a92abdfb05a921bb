"""
Section-level controller for one lesson (carry-over or borrowing).

Owns the current problem, the demo PlaybackController and the practice
attempt. Every change of problem or mode stops playback first, so a stale
timer tick can never land on the new problem.
"""

import logging
import random
from typing import Any, Callable, Literal, Optional

from columnmath.models.lesson import DemoSnapshot, PracticeResult, Problem, SessionSummary
from columnmath.services.playback import PlaybackController, SoundFn, SpeakFn
from columnmath.services.practice import PracticeAttempt, Score, summarize_session
from columnmath.services.telemetry import emit_event
from columnmath.skills.base import SkillContract

logger = logging.getLogger("columnmath.lesson_session")

Mode = Literal["demo", "practice"]
MODES: tuple[str, ...] = ("demo", "practice")


class LessonSession:
    def __init__(
        self,
        contract: SkillContract,
        *,
        rng: Optional[random.Random] = None,
        speak: Optional[SpeakFn] = None,
        play_sound: Optional[SoundFn] = None,
        on_snapshot: Optional[Callable[[DemoSnapshot], Any]] = None,
        scheduler: Any = None,
        interval_ms: Optional[int] = None,
    ):
        self.contract = contract
        self.rng = rng or random.Random()
        self.play_sound = play_sound
        self.mode: Mode = "demo"
        self.score = Score()
        self.problem: Problem = contract.build_variant(self.rng)
        self.attempt: PracticeAttempt = contract.new_attempt(self.problem)
        self.playback = PlaybackController(
            contract,
            self.problem,
            speak=speak,
            play_sound=play_sound,
            on_snapshot=on_snapshot,
            scheduler=scheduler,
            interval_ms=interval_ms,
        )

    def new_problem(self) -> Problem:
        self.playback.stop()
        self.problem = self.contract.build_variant(self.rng)
        self.playback.reset(self.problem)
        self.attempt = self.contract.new_attempt(self.problem)
        logger.debug("%s new problem %s", self.contract.skill_tag, self.problem)
        return self.problem

    def set_mode(self, mode: Mode) -> Problem:
        if mode not in MODES:
            raise ValueError(f"unknown mode: {mode!r}")
        self.playback.stop()
        self.mode = mode
        return self.new_problem()

    def check_answer(self) -> PracticeResult:
        first_check = not self.attempt.submitted
        result = self.attempt.check()
        if first_check:
            self.score.record(result.is_correct)
            if self.play_sound is not None:
                self.play_sound("correct" if result.is_correct else "incorrect")
            emit_event(
                "practice_attempt",
                route="lesson_session",
                version="v1",
                skill_tag=self.contract.skill_tag,
                ok=result.is_correct,
            )
        return result

    def summary(self) -> SessionSummary:
        return summarize_session(self.score)

    def close(self) -> None:
        self.playback.close()
