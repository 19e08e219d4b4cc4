"""
Resolve the single display state for the hero panel.

Every prayer's windows are checked in canonical prayer order, and within a
prayer in the fixed priority order of RULES. The first match wins. When no
window matches, the next upcoming call-to-prayer is shown instead.
"""

import datetime

from namaz.prayers import (
    EmptyScheduleError,
    LogicConfig,
    PrayerInstant,
    PrayerSet,
    ScheduleUnavailableError,
    TaraweehConfig,
    next_calendar_day,
    seconds_until,
)
from namaz.state import (
    CallMoment,
    CongregationWait,
    DisplayState,
    NextPrayer,
    PrayerInProgress,
    PreCall,
    PreCongregation,
)
from namaz.windows import PrayerWindows, WindowKind, compute_windows


def _pre_congregation(prayer, now):
    return PreCongregation(prayer, seconds_until(prayer.congregation_time, now))


def _pre_call(prayer, now):
    return PreCall(prayer, seconds_until(prayer.call_time, now))


def _call_moment(prayer, now):
    return CallMoment(prayer)


def _congregation_wait(prayer, now):
    return CongregationWait(prayer, seconds_until(prayer.congregation_time, now))


def _prayer_in_progress(prayer, now):
    return PrayerInProgress(prayer)


# Priority order, highest first. Not chronological.
RULES = [
    (WindowKind.PRE_CONGREGATION, _pre_congregation),
    (WindowKind.PRE_CALL, _pre_call),
    (WindowKind.CALL_MOMENT, _call_moment),
    (WindowKind.CONGREGATION_WAIT, _congregation_wait),
    (WindowKind.PRAYER_IN_PROGRESS, _prayer_in_progress),
]


def match_windows(windows: PrayerWindows, now: datetime.datetime) -> DisplayState | None:
    """Apply RULES to one prayer's windows; return the first matching state or None."""
    for kind, make_state in RULES:
        window = windows.get(kind)
        if window is not None and window.contains(now):
            return make_state(windows.prayer, now)
    return None


def match_prayers(
    prayer_set: PrayerSet,
    logic: LogicConfig,
    taraweeh: TaraweehConfig,
    now: datetime.datetime,
) -> DisplayState | None:
    """
    Return the state of the first prayer, in canonical order, that has a
    window open at ``now``. Returns None when no window matches.
    """
    for prayer in prayer_set:
        state = match_windows(compute_windows(prayer, logic, taraweeh), now)
        if state is not None:
            return state
    return None


def next_prayer(prayer_set: PrayerSet, now: datetime.datetime) -> NextPrayer:
    """
    Pick the earliest call time strictly after ``now``.

    If every call time today has passed, the first prayer in canonical order
    is shown with its call time moved to the next calendar day.
    """
    if not len(prayer_set):
        raise EmptyScheduleError("Cannot pick the next prayer from an empty schedule")

    upcoming = None
    for prayer in prayer_set:
        if prayer.call_time > now and (upcoming is None or prayer.call_time < upcoming.call_time):
            upcoming = prayer

    if upcoming is not None:
        return NextPrayer(upcoming, seconds_until(upcoming.call_time, now))

    first = prayer_set.prayers[0]
    tomorrow = next_calendar_day(first.call_time)
    return NextPrayer(first, seconds_until(tomorrow, now), next_day=True)


def _check_schedule(prayer_set: PrayerSet) -> None:
    if not prayer_set.available:
        raise ScheduleUnavailableError(prayer_set.error)
    if not len(prayer_set):
        raise EmptyScheduleError("Prayer schedule is empty")


def resolve_display_state(
    prayer_set: PrayerSet,
    logic: LogicConfig,
    taraweeh: TaraweehConfig,
    now: datetime.datetime,
) -> DisplayState:
    """
    Resolve exactly one display state for ``now``.

    Raises ScheduleUnavailableError or EmptyScheduleError when the caller
    hands over a schedule the display cannot run on.
    """
    _check_schedule(prayer_set)
    state = match_prayers(prayer_set, logic, taraweeh, now)
    if state is None:
        state = next_prayer(prayer_set, now)
    return state


def is_prayer_currently_active(
    prayer: PrayerInstant,
    logic: LogicConfig,
    taraweeh: TaraweehConfig,
    now: datetime.datetime,
) -> bool:
    """True while ``now`` falls in the prayer's in-progress window."""
    return compute_windows(prayer, logic, taraweeh).prayer_in_progress.contains(now)
