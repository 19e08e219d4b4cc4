"""Desktop notifications when the display reaches the adhan or the iqama."""

import logging

from namaz.state import CallMoment, PreCongregation

try:
    from plyer import notification as plyer_notification
    _PLYER_AVAILABLE = True
except ImportError:
    _PLYER_AVAILABLE = False

logger = logging.getLogger(__name__)

APP_NAME = "Namaz Kiosk"
APP_ICON = ""  # Path to icon file; empty = default


def _send_plyer(title: str, message: str, timeout: int = 10) -> None:
    """Send a desktop notification via plyer (cross-platform)."""
    if not _PLYER_AVAILABLE:
        return
    try:
        kwargs = dict(
            app_name=APP_NAME,
            title=title,
            message=message,
            timeout=timeout,
        )
        if APP_ICON:
            kwargs["app_icon"] = APP_ICON
        plyer_notification.notify(**kwargs)
    except Exception:
        # plyer raises NotImplementedError or backend errors on headless kiosks
        logger.warning("Desktop notification failed: %s", title, exc_info=True)


def notify_azan(prayer_display_name: str) -> None:
    title = f"🕌 {prayer_display_name} — Azan"
    message = f"It is now time for {prayer_display_name} prayer. Allahu Akbar!"
    _send_plyer(title, message, timeout=30)


def notify_jamat(prayer_display_name: str, seconds: int) -> None:
    title = f"🕌 {prayer_display_name} — Jamat"
    message = f"{prayer_display_name} congregation starts in {seconds} seconds. Straighten the lines."
    _send_plyer(title, message, timeout=15)


def notify_state_change(previous, current) -> bool:
    """
    Notify when the display enters the call moment or the pre-congregation
    countdown. Repeated ticks in the same state send nothing.

    Returns True if a notification was sent.
    """
    if current is None:
        return False
    if (
        previous is not None
        and previous.kind == current.kind
        and previous.prayer.name is current.prayer.name
    ):
        return False

    if isinstance(current, CallMoment):
        notify_azan(current.prayer.display_name)
        return True
    if isinstance(current, PreCongregation):
        notify_jamat(current.prayer.display_name, current.countdown_seconds)
        return True
    return False


class StateChangeNotifier:
    """Ticker listener that remembers the previous state between evaluations."""

    def __init__(self):
        self._previous = None

    def __call__(self, state) -> None:
        notify_state_change(self._previous, state)
        self._previous = state
