"""
Guided session engine.

Two parts:

- build_session_steps(): linearizes the *first* entry of every exercise
  into single-set steps, each with a suggested reps/weight and a resolved
  rest (set rest, else exercise rest, else none).
- A state machine that drives a session over those steps. transition()
  is a pure function (state, event) -> state; SessionRunner wraps it with
  the callbacks and rest notifications a front end needs.

Phases: input -> (rest ->) input ... -> done, with confirm reachable from
input and rest through EndRequest. The rest countdown only moves on Tick
events, so any clock (wall clock, a test loop) can drive it.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Literal, Protocol, Union

from .config import MAX_NUMBER_DIGITS, RESULT_SEPARATOR
from .grammar import parse_single_set
from .models import BODYWEIGHT, Document, SessionResult, SessionStep, Weight, WorkoutSet, name_key

logger = logging.getLogger(__name__)

Phase = Literal["input", "rest", "confirm", "done"]
Outcome = Literal["completed", "cancelled"]

_LEADING_INT_RE = re.compile(rf"^\s*([0-9]{{1,{MAX_NUMBER_DIGITS}}})(?![0-9])")


class EmptySessionError(Exception):
    """Raised when a document has no exercise with recorded entries."""

    pass


# =============================================================================
# Step builder
# =============================================================================


def build_session_steps(document: Document) -> list[SessionStep]:
    """
    Expand each exercise's first entry into single-set steps.

    Later entries are history and are ignored. Cardio sets carry no
    reps/weight and are skipped.

    Args:
        document: Parsed workout text

    Returns:
        Steps in exercise order, then set order, then repetition order
    """
    steps: list[SessionStep] = []
    for ex in document:
        if not ex.entries:
            continue
        for si, s in enumerate(ex.entries[0].sets):
            if not isinstance(s, WorkoutSet):
                continue
            rest = s.rest_seconds or ex.rest_seconds or None
            for ri in range(s.repeat_count):
                steps.append(
                    SessionStep(
                        exercise=ex.name,
                        set_index=si,
                        rep_index=ri,
                        total_for_segment=s.repeat_count,
                        suggested_reps=s.reps,
                        suggested_weight=s.weight,
                        rest_seconds=rest,
                    )
                )
    return steps


def format_pair(reps: int, weight: Weight) -> str:
    """Render reps and weight the way they are typed: "8*135", "10*BW"."""
    return f"{reps}{RESULT_SEPARATOR}{weight}"


def parse_session_input(text: str) -> tuple[int, Weight]:
    """
    Read free-form "reps*weight" input.

    Uses the set-expression grammar; when that fails, falls back to
    reps-only bodyweight using the leading integer (0 when there is none).
    """
    parsed = parse_single_set(text.strip())
    if parsed is not None:
        return parsed.reps, parsed.weight
    m = _LEADING_INT_RE.match(text)
    reps = int(m.group(1)) if m else 0
    logger.debug("Input %r is not a set expression; using %d reps bodyweight", text, reps)
    return reps, BODYWEIGHT


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class Submit:
    """The user finished the current step with this "reps*weight" text."""

    text: str


@dataclass(frozen=True)
class Tick:
    """One second of rest elapsed."""


@dataclass(frozen=True)
class SkipRest:
    pass


@dataclass(frozen=True)
class EndRequest:
    pass


@dataclass(frozen=True)
class ConfirmSave:
    pass


@dataclass(frozen=True)
class ConfirmDiscard:
    pass


@dataclass(frozen=True)
class ConfirmBack:
    pass


SessionEvent = Union[Submit, Tick, SkipRest, EndRequest, ConfirmSave, ConfirmDiscard, ConfirmBack]


# =============================================================================
# State
# =============================================================================


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of a guided session.

    cursor points at the next step to perform; timer is the remaining rest
    in seconds and survives a detour through confirm.
    """

    steps: tuple[SessionStep, ...]
    cursor: int = 0
    phase: Phase = "input"
    timer: int = 0
    results: tuple[SessionResult, ...] = ()
    outcome: Outcome | None = None

    @property
    def current_step(self) -> SessionStep | None:
        if 0 <= self.cursor < len(self.steps):
            return self.steps[self.cursor]
        return None

    @property
    def is_finished(self) -> bool:
        return self.phase == "done"

    @property
    def rest_total(self) -> int:
        """Full rest of the step that started the current countdown."""
        if self.cursor == 0:
            return 0
        return self.steps[self.cursor - 1].rest_seconds or 0

    def exercise_progress(self) -> tuple[int, int]:
        """(set number, total sets) of the current step within its exercise."""
        step = self.current_step
        if step is None:
            return 0, 0
        key = name_key(step.exercise)
        done = sum(1 for s in self.steps[: self.cursor + 1] if name_key(s.exercise) == key)
        total = sum(1 for s in self.steps if name_key(s.exercise) == key)
        return done, total

    def prefill(self) -> str:
        """
        Default input for the current step.

        The last result recorded for the same exercise in this session,
        else the step's suggestion.
        """
        step = self.current_step
        if step is None:
            return ""
        key = name_key(step.exercise)
        for r in reversed(self.results):
            if name_key(r.exercise) == key:
                return format_pair(r.reps, r.weight)
        return format_pair(step.suggested_reps, step.suggested_weight)


def start_session(document: Document) -> SessionState:
    """
    Initial state for a session over the document.

    Raises:
        EmptySessionError: If no exercise has a recorded entry
    """
    steps = build_session_steps(document)
    if not steps:
        raise EmptySessionError("No exercises with entries to run.")
    return SessionState(steps=tuple(steps))


# =============================================================================
# Transitions
# =============================================================================


def _finish(state: SessionState, results: tuple[SessionResult, ...]) -> SessionState:
    outcome: Outcome = "completed" if results else "cancelled"
    return replace(state, phase="done", timer=0, results=results, outcome=outcome)


def _submit(state: SessionState, text: str) -> SessionState:
    step = state.current_step
    if step is None:
        return state
    reps, weight = parse_session_input(text)
    results = state.results + (SessionResult(exercise=step.exercise, reps=reps, weight=weight),)
    cursor = state.cursor + 1

    if cursor >= len(state.steps):
        return _finish(state, results)
    if step.rest_seconds:
        return replace(state, cursor=cursor, results=results, phase="rest", timer=step.rest_seconds)
    return replace(state, cursor=cursor, results=results, phase="input", timer=0)


def transition(state: SessionState, event: SessionEvent) -> SessionState:
    """
    Apply one event.

    Events that make no sense in the current phase leave the state
    unchanged. done is terminal.
    """
    phase = state.phase

    if phase == "input":
        if isinstance(event, Submit):
            return _submit(state, event.text)
        if isinstance(event, EndRequest):
            return replace(state, phase="confirm")

    elif phase == "rest":
        if isinstance(event, Tick):
            remaining = state.timer - 1
            if remaining <= 0:
                return replace(state, phase="input", timer=0)
            return replace(state, timer=remaining)
        if isinstance(event, SkipRest):
            return replace(state, phase="input", timer=0)
        if isinstance(event, EndRequest):
            return replace(state, phase="confirm")

    elif phase == "confirm":
        if isinstance(event, ConfirmSave):
            return _finish(state, state.results)
        if isinstance(event, ConfirmDiscard):
            return _finish(state, ())
        if isinstance(event, ConfirmBack):
            return replace(state, phase="rest" if state.timer > 0 else "input")

    logger.debug("Ignoring %s in phase %s", type(event).__name__, phase)
    return state


# =============================================================================
# Runner
# =============================================================================


class RestNotifier(Protocol):
    """Best-effort "rest is over" alert."""

    def schedule_one_shot(self, after_seconds: int) -> None: ...

    def cancel_scheduled(self) -> None: ...


class SessionRunner:
    """
    Stateful wrapper around transition().

    Reports the outcome exactly once: on_complete(results) when the session
    ends with results, on_cancel() otherwise. Schedules a rest notification
    on entering rest and cancels it when rest ends early.
    """

    def __init__(
        self,
        document: Document,
        on_complete: Callable[[list[SessionResult]], None],
        on_cancel: Callable[[], None],
        notifier: RestNotifier | None = None,
    ):
        self.state = start_session(document)
        self._on_complete = on_complete
        self._on_cancel = on_cancel
        self._notifier = notifier
        self._reported = False

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def dispatch(self, event: SessionEvent) -> SessionState:
        """Apply an event and fire side effects for the phase change."""
        before = self.state
        after = transition(before, event)
        self.state = after

        if before.phase == "input" and after.phase == "rest":
            self._notify(after.timer)
        elif isinstance(event, SkipRest) and after.phase == "input":
            self._cancel_notification()
        elif after.phase == "done" and before.phase != "done":
            self._cancel_notification()

        if after.is_finished and not self._reported:
            self._reported = True
            if after.outcome == "completed":
                self._on_complete(list(after.results))
            else:
                self._on_cancel()
        return after

    def _notify(self, seconds: int) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.schedule_one_shot(seconds)
        except Exception as e:  # notifications never break a session
            logger.warning("Could not schedule rest notification: %s", e)

    def _cancel_notification(self) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.cancel_scheduled()
        except Exception as e:
            logger.warning("Could not cancel rest notification: %s", e)
