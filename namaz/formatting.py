"""Text shown by the hero panel and the prayer list for a display state."""

import datetime

from namaz.prayers import LogicConfig, PrayerSet, TaraweehConfig
from namaz.resolver import is_prayer_currently_active
from namaz.state import (
    CallMoment,
    CongregationWait,
    NextPrayer,
    PrayerInProgress,
    PreCall,
    PreCongregation,
)

BADGE_NOW = "NOW"
BADGE_NEXT = "NEXT"


def format_countdown(seconds: int) -> str:
    """Format seconds into HH:MM:SS countdown string."""
    if seconds < 0:
        return "00:00:00"
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_seconds(seconds: int) -> str:
    """Two-digit seconds for the short PreCall / PreCongregation counters."""
    return f"{max(seconds, 0):02d}"


def hero_text(state) -> dict:
    """
    Labels for the hero panel.

    Returns a dict with ``headline`` (above the name), ``name``,
    ``caption`` (below the counter) and ``counter`` (empty when the
    state has no countdown).
    """
    name = state.prayer.display_name

    if isinstance(state, PreCall):
        return {"headline": "", "name": name, "caption": "AZAN IN",
                "counter": format_seconds(state.countdown_seconds)}
    if isinstance(state, CallMoment):
        return {"headline": "", "name": name, "caption": "AZAN", "counter": ""}
    if isinstance(state, PreCongregation):
        return {"headline": "JAMAT", "name": name, "caption": "STRAIGHTEN LINES",
                "counter": format_seconds(state.countdown_seconds)}
    if isinstance(state, PrayerInProgress):
        return {"headline": "NOW", "name": name, "caption": "", "counter": ""}
    if isinstance(state, CongregationWait):
        return {"headline": f"{name} Jamat in", "name": name, "caption": "",
                "counter": format_countdown(state.countdown_seconds)}
    if isinstance(state, NextPrayer):
        headline = "UPCOMING AZAN (TOMORROW)" if state.next_day else "UPCOMING AZAN"
        return {"headline": headline, "name": name, "caption": "",
                "counter": format_countdown(state.countdown_seconds)}
    raise TypeError(f"Unknown display state: {state!r}")


def list_badges(
    prayer_set: PrayerSet,
    state,
    logic: LogicConfig,
    taraweeh: TaraweehConfig,
    now: datetime.datetime,
) -> dict:
    """
    Map PrayerName -> badge text for the prayer list.

    The first prayer currently in progress gets NOW. If none is, the
    hero's next prayer gets NEXT. Rows without a badge are left out.
    """
    for prayer in prayer_set:
        if is_prayer_currently_active(prayer, logic, taraweeh, now):
            return {prayer.name: BADGE_NOW}
    if isinstance(state, NextPrayer):
        return {state.prayer.name: BADGE_NEXT}
    return {}


def header_titles(settings: dict) -> dict:
    """Masjid name and the upper-cased sub-location line for the header."""
    return {
        "masjid_name": settings.get("masjid_name", "").strip(),
        "sub_location": settings.get("sub_location", "").strip().upper(),
    }
