"""
Study timer state machine.

A timer never counts ticks. While running it only remembers when it (virtually)
started, and elapsed time is derived from that timestamp on every read, so a
timer restored from storage after a restart shows the right value.
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional


class TimerMode(str, enum.Enum):
    focus = "focus"
    pomodoro = "pomodoro"
    short_break = "short_break"
    long_break = "long_break"
    custom = "custom"


DEFAULT_TARGET_SECONDS = {
    TimerMode.focus: 0,
    TimerMode.pomodoro: 25 * 60,
    TimerMode.short_break: 5 * 60,
    TimerMode.long_break: 15 * 60,
    TimerMode.custom: 45 * 60,
}

BREAK_MODES = {TimerMode.short_break, TimerMode.long_break}


@dataclass(frozen=True)
class TimerState:
    subject_id: int
    mode: TimerMode = TimerMode.pomodoro
    target_seconds: int = 25 * 60
    is_running: bool = False
    elapsed_seconds: int = 0
    started_at: Optional[datetime] = None

    @property
    def counts_up(self) -> bool:
        return self.mode == TimerMode.focus


def _seconds_between(start: datetime, end: datetime) -> int:
    return max(0, math.floor((end - start).total_seconds()))


def elapsed_seconds(state: TimerState, now: datetime) -> int:
    if state.is_running and state.started_at is not None:
        return _seconds_between(state.started_at, now)
    return state.elapsed_seconds


def remaining_seconds(state: TimerState, now: datetime) -> Optional[int]:
    """Seconds left on a countdown, or None for the open-ended focus mode."""
    if state.counts_up:
        return None
    return max(0, state.target_seconds - elapsed_seconds(state, now))


def is_finished(state: TimerState, now: datetime) -> bool:
    if state.counts_up or state.target_seconds <= 0:
        return False
    return elapsed_seconds(state, now) >= state.target_seconds


def start_timer(
    subject_id: int,
    mode: TimerMode = TimerMode.pomodoro,
    target_seconds: Optional[int] = None,
    elapsed: int = 0,
    *,
    now: datetime,
) -> TimerState:
    mode = TimerMode(mode)
    if target_seconds is None:
        target_seconds = DEFAULT_TARGET_SECONDS[mode]
    if mode == TimerMode.focus:
        target_seconds = 0
    if target_seconds < 0 or elapsed < 0:
        raise ValueError("timer durations cannot be negative")
    return TimerState(
        subject_id=subject_id,
        mode=mode,
        target_seconds=target_seconds,
        is_running=True,
        elapsed_seconds=elapsed,
        started_at=now - timedelta(seconds=elapsed),
    )


def pause_timer(state: TimerState, *, now: datetime) -> TimerState:
    if not state.is_running:
        return state
    return replace(state, is_running=False, elapsed_seconds=elapsed_seconds(state, now))


def resume_timer(state: TimerState, *, now: datetime) -> TimerState:
    if state.is_running:
        return state
    return replace(
        state,
        is_running=True,
        started_at=now - timedelta(seconds=state.elapsed_seconds),
    )


def reset_timer(state: TimerState, *, now: datetime) -> TimerState:
    """Stop the timer and forget its progress; a cleared timer has no start time."""
    return replace(state, is_running=False, elapsed_seconds=0, started_at=None)


def stop_timer(state: TimerState, *, now: datetime) -> TimerState:
    return pause_timer(state, now=now)


def session_minutes(state: TimerState, now: datetime) -> int:
    """Minutes of study to log when the timer is completed.

    Focus and custom timers log what actually elapsed, a pomodoro always counts
    as its full length and breaks are not study time. A cleared timer logs
    nothing.
    """
    if not state.is_running and state.started_at is None:
        return 0
    if state.mode in BREAK_MODES:
        return 0
    if state.mode == TimerMode.pomodoro:
        return round(state.target_seconds / 60)
    seconds = elapsed_seconds(state, now)
    if state.mode == TimerMode.custom and state.target_seconds:
        seconds = min(seconds, state.target_seconds)
    return round(seconds / 60)
