"""Per-prayer time windows that drive the hero display."""

import datetime
import enum
from dataclasses import dataclass

from namaz.prayers import (
    DEFAULT_TARAWEEH_DURATION_MINUTES,
    LogicConfig,
    PrayerInstant,
    PrayerName,
    TaraweehConfig,
)


class WindowKind(enum.Enum):
    PRE_CALL = "pre_call"
    CALL_MOMENT = "call_moment"
    CONGREGATION_WAIT = "congregation_wait"
    PRE_CONGREGATION = "pre_congregation"
    PRAYER_IN_PROGRESS = "prayer_in_progress"


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end)."""

    start: datetime.datetime
    end: datetime.datetime

    def contains(self, now: datetime.datetime) -> bool:
        return self.start <= now < self.end


@dataclass(frozen=True)
class PrayerWindows:
    prayer: PrayerInstant
    pre_call: TimeWindow
    call_moment: TimeWindow
    congregation_wait: TimeWindow | None
    pre_congregation: TimeWindow
    prayer_in_progress: TimeWindow

    def get(self, kind: WindowKind) -> TimeWindow | None:
        return getattr(self, kind.value)


def prayer_duration_minutes(
    prayer: PrayerInstant, logic: LogicConfig, taraweeh: TaraweehConfig
) -> int:
    """Taraweeh runs for its own configured duration; every other prayer uses the default."""
    if prayer.name is PrayerName.TARAWEEH:
        return taraweeh.duration_minutes or DEFAULT_TARAWEEH_DURATION_MINUTES
    return logic.default_prayer_duration_minutes


def compute_windows(
    prayer: PrayerInstant, logic: LogicConfig, taraweeh: TaraweehConfig
) -> PrayerWindows:
    """
    Compute the five candidate windows for one prayer.

    The congregation wait only exists when the call moment ends strictly
    before the pre-congregation countdown starts.
    """
    adhan = prayer.call_time
    iqama = prayer.congregation_time

    call_end = adhan + datetime.timedelta(seconds=logic.call_duration_seconds)
    pre_iqama_start = iqama - datetime.timedelta(seconds=logic.pre_congregation_seconds)
    duration = datetime.timedelta(minutes=prayer_duration_minutes(prayer, logic, taraweeh))

    wait = TimeWindow(call_end, pre_iqama_start) if call_end < pre_iqama_start else None

    return PrayerWindows(
        prayer=prayer,
        pre_call=TimeWindow(adhan - datetime.timedelta(seconds=logic.pre_call_seconds), adhan),
        call_moment=TimeWindow(adhan, call_end),
        congregation_wait=wait,
        pre_congregation=TimeWindow(pre_iqama_start, iqama),
        prayer_in_progress=TimeWindow(iqama, iqama + duration),
    )
