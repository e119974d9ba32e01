"""XP, levels and daily streaks."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
import math

from .models import ProgressState, Status, TopicNode

XP_PER_LEVEL = 100

# (minimum streak days, multiplier), highest first
STREAK_BONUSES: list[tuple[int, float]] = [
    (30, 2.0),
    (14, 1.5),
    (7, 1.25),
    (3, 1.1),
]


def level_for_xp(xp: int) -> int:
    return 1 + xp // XP_PER_LEVEL


def streak_bonus(streak_days: int) -> float:
    for min_days, multiplier in STREAK_BONUSES:
        if streak_days >= min_days:
            return multiplier
    return 1.0


def streak_bonus_text(streak_days: int) -> str:
    bonus = streak_bonus(streak_days)
    if bonus == 1.0:
        return ""
    return f"{round((bonus - 1) * 100)}% streak bonus!"


def award_xp(state: ProgressState, amount: int) -> ProgressState:
    """Add ``amount`` XP scaled by the current streak bonus, never below zero."""
    bonus_xp = math.floor(amount * streak_bonus(state.streak_days))
    return replace(state, xp=max(0, state.xp + bonus_xp))


def _day_of(value: str) -> date:
    return datetime.fromisoformat(value).date()


def update_daily_streak(state: ProgressState, now: datetime | None = None) -> ProgressState:
    """Count consecutive active days.

    Same day: unchanged. Next day: streak + 1. Any gap: streak restarts at 1.
    """
    today = (now or datetime.now()).date()
    if not state.last_active_iso:
        return replace(state, last_active_iso=today.isoformat(), streak_days=1)

    diff_days = (today - _day_of(state.last_active_iso)).days
    if diff_days == 0:
        return state
    if diff_days == 1:
        return replace(state, last_active_iso=today.isoformat(), streak_days=state.streak_days + 1)
    return replace(state, last_active_iso=today.isoformat(), streak_days=1)


def toggle_completion(
    state: ProgressState,
    node: TopicNode,
    status: Status,
    now: datetime | None = None,
) -> ProgressState:
    """Flip a topic's completion, adjusting XP and the daily streak.

    Locked topics cannot be toggled; the state is returned unchanged.
    """
    if status == Status.LOCKED:
        return state
    now_completed = not state.completed.get(node.id, False)
    delta = node.xp if now_completed else -node.xp
    updated = update_daily_streak(award_xp(state, delta), now)
    return replace(updated, completed={**updated.completed, node.id: now_completed})


def toggle_reviewed(state: ProgressState, node_id: str) -> ProgressState:
    return replace(state, reviewed={**state.reviewed, node_id: not state.reviewed.get(node_id, False)})


def save_note(state: ProgressState, node_id: str, text: str) -> ProgressState:
    return replace(state, notes={**state.notes, node_id: text})
