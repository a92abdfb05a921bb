"""
Playback controller for the step-by-step demos.

Wraps a SkillContract's pure compute_state_for_step with the effectful
parts: one repeating timer, the narration sink and the sound sink.

  play()          cancel, jump to step 0, then advance one step per interval;
                  after the last step is committed, stop and celebrate.
  go_to_step(k)   cancel, compute step k once, synchronously.
  stop()          cancel, keep the current snapshot.
  reset(problem)  stop, swap the problem, back to step 0.
  close()         cancel for good; late callbacks become no-ops.

The timer comes from a scheduler with asyncio's call_later signature
(call_later(delay_s, callback) -> handle with cancel()). The running event
loop is used when none is given. Narration is fire-and-forget: an
awaitable returned by speak() is scheduled, never awaited.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from columnmath.core.config import get_settings
from columnmath.models.lesson import DemoSnapshot, Problem, SoundKind
from columnmath.skills.base import SkillContract

logger = logging.getLogger("columnmath.playback")

SpeakFn = Callable[[str], Optional[Awaitable[None]]]
SoundFn = Callable[[SoundKind], Any]


class PlaybackController:
    def __init__(
        self,
        contract: SkillContract,
        problem: Problem,
        *,
        speak: Optional[SpeakFn] = None,
        play_sound: Optional[SoundFn] = None,
        on_snapshot: Optional[Callable[[DemoSnapshot], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
        scheduler: Any = None,
        interval_ms: Optional[int] = None,
        narrate_on_seek: Optional[bool] = None,
    ):
        settings = get_settings()
        self.contract = contract
        self.problem = problem
        self.speak = speak
        self.play_sound = play_sound
        self.on_snapshot = on_snapshot
        self.on_complete = on_complete
        self.scheduler = scheduler
        self.interval_s = (interval_ms if interval_ms is not None else settings.playback_interval_ms) / 1000
        self.narrate_on_seek = settings.narrate_on_seek if narrate_on_seek is None else narrate_on_seek

        self.current_step = 0
        self.is_playing = False
        self.closed = False
        self._timer = None
        self._pending: set = set()
        self.snapshot = contract.compute_state_for_step(problem, 0)

    # ── commands ─────────────────────────────────────────────────────────────

    def play(self) -> None:
        if self.closed:
            logger.debug("play() on closed controller ignored")
            return
        # raises before touching state when there is no loop to run on
        scheduler = self._scheduler()
        self._cancel_timer()
        self._commit(0, narrate=True)
        self.is_playing = True
        self._timer = scheduler.call_later(self.interval_s, self._tick)

    def go_to_step(self, step: int) -> DemoSnapshot:
        self.stop()
        self._sound("click")
        return self._commit(step, narrate=self.narrate_on_seek)

    def stop(self) -> None:
        self._cancel_timer()
        self.is_playing = False

    def reset(self, problem: Optional[Problem] = None) -> DemoSnapshot:
        self.stop()
        if problem is not None:
            self.problem = problem
        return self._commit(0, narrate=False)

    def close(self) -> None:
        self.stop()
        self.closed = True
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()

    # ── internals ────────────────────────────────────────────────────────────

    def _commit(self, step: int, narrate: bool) -> DemoSnapshot:
        snapshot = self.contract.compute_state_for_step(self.problem, step)
        self.snapshot = snapshot
        self.current_step = snapshot.step
        logger.debug("%s step=%d label=%s", self.contract.skill_tag, snapshot.step, snapshot.label)
        if self.on_snapshot is not None:
            self.on_snapshot(snapshot)
        if narrate and snapshot.narration:
            self._narrate(snapshot.narration)
        return snapshot

    def _scheduler(self):
        return self.scheduler or asyncio.get_running_loop()

    def _schedule_tick(self) -> None:
        self._timer = self._scheduler().call_later(self.interval_s, self._tick)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self) -> None:
        self._timer = None
        if self.closed or not self.is_playing:
            return

        self._commit(self.current_step + 1, narrate=True)
        if self.current_step >= self.contract.last_step:
            self.is_playing = False
            self._sound("celebrate")
            if self.on_complete is not None:
                self.on_complete()
            return

        self._schedule_tick()

    def _sound(self, kind: SoundKind) -> None:
        if self.play_sound is not None:
            self.play_sound(kind)

    def _narrate(self, text: str) -> None:
        if self.speak is None:
            return
        result = self.speak(text)
        if not inspect.isawaitable(result):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            logger.debug("narration dropped, no running loop: %s", text)
            return
        task = asyncio.ensure_future(result, loop=loop)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
