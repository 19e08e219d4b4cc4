#!/usr/bin/env python3
"""
Namaz Kiosk
Full-screen masjid display showing:
  - Live clock and date (Gregorian + Hijri)
  - Hero panel: next azan countdown, azan / jamat countdowns, prayer in progress
  - Daily prayer list with azan and jamat times, NOW / NEXT badges
  - Desktop notifications at azan and just before jamat
"""

import datetime
import logging
import os
import threading
import tkinter as tk

import pytz

from namaz.formatting import header_titles, hero_text, list_badges
from namaz.notifier import StateChangeNotifier
from namaz.prayers import PRAYER_DISPLAY, PRAYER_ORDER, PrayerSet
from namaz.schedule import load_schedule
from namaz.settings import load_settings, logic_config_from, taraweeh_config_from
from namaz.ticker import HeroTicker

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# Theme constants
# ──────────────────────────────────────────────────────────────────────────────
BG_DARK = "#000000"
BG_CARD = "#0b0f14"
BG_HIGHLIGHT = "#0a1a25"     # highlighted prayer row
BORDER_COLOR = "#1f2933"
ACCENT_BLUE = "#00d8ff"      # neon blue accents
TEXT_WHITE = "#e6edf3"
TEXT_DIM = "#8b949e"
TEXT_RED = "#ff6b6b"

FONT_SM = ("Helvetica", 14, "bold")
FONT_MD = ("Helvetica", 24, "bold")
FONT_LG = ("Helvetica", 48, "bold")
FONT_HERO = ("Helvetica", 96, "bold")
FONT_COUNTER = ("Helvetica", 160, "bold")
FONT_CLOCK = ("Helvetica", 40, "bold")

RELOAD_MS = 60 * 60 * 1000  # refetch the schedule hourly
DAY_CHECK_MS = 60 * 1000    # and whenever the calendar day changes


class NamazKioskApp:
    def __init__(self, root: tk.Tk, clock=datetime.datetime.now):
        self.root = root
        self._clock = clock  # clock(tz) -> aware datetime
        self.settings = {}
        self.tz = pytz.utc
        self.prayer_set = None
        self.hijri = {}
        self._loaded_for = None     # date of the schedule on screen
        self._requested_for = None  # date a rollover reload was started for

        self.ticker = HeroTicker(root.after, root.after_cancel, clock=self._now)
        self.ticker.subscribe(self._render)
        self.ticker.subscribe(StateChangeNotifier())

        self._setup_window()
        self._build_ui()
        self.ticker.start()
        self._start_data_load()
        self._schedule_reload_checks()

    def _now(self) -> datetime.datetime:
        return self._clock(self.tz)

    # ──────────────────────────────────────────────────────────────────────
    # Window setup
    # ──────────────────────────────────────────────────────────────────────
    def _setup_window(self):
        root = self.root
        root.title("Namaz Kiosk")
        root.configure(bg=BG_DARK)
        root.attributes("-fullscreen", True)
        root.bind("<Escape>", lambda event: self.close())
        root.protocol("WM_DELETE_WINDOW", self.close)

    def close(self):
        self.ticker.stop()
        self.root.destroy()

    # ──────────────────────────────────────────────────────────────────────
    # UI construction
    # ──────────────────────────────────────────────────────────────────────
    def _build_ui(self):
        root = self.root

        # ── header: clock + dates ─────────────────────────────────────────
        header = tk.Frame(root, bg=BG_CARD)
        header.pack(fill=tk.X, side=tk.TOP)

        self.lbl_clock = tk.Label(header, text="00:00:00", font=FONT_CLOCK, fg=TEXT_WHITE, bg=BG_CARD)
        self.lbl_clock.pack(side=tk.LEFT, padx=24, pady=8)

        masjid = tk.Frame(header, bg=BG_CARD)
        masjid.pack(side=tk.LEFT, expand=True)
        self.lbl_masjid = tk.Label(masjid, text="", font=FONT_MD, fg=ACCENT_BLUE, bg=BG_CARD)
        self.lbl_masjid.pack()
        self.lbl_sub_location = tk.Label(masjid, text="", font=FONT_SM, fg=TEXT_DIM, bg=BG_CARD)
        self.lbl_sub_location.pack()

        dates = tk.Frame(header, bg=BG_CARD)
        dates.pack(side=tk.RIGHT, padx=24)
        self.lbl_date = tk.Label(dates, text="", font=FONT_SM, fg=TEXT_WHITE, bg=BG_CARD, anchor="e")
        self.lbl_date.pack(fill=tk.X)
        self.lbl_hijri = tk.Label(dates, text="", font=FONT_SM, fg=ACCENT_BLUE, bg=BG_CARD, anchor="e")
        self.lbl_hijri.pack(fill=tk.X)

        body = tk.Frame(root, bg=BG_DARK)
        body.pack(fill=tk.BOTH, expand=True, padx=16, pady=16)

        # ── hero panel ────────────────────────────────────────────────────
        hero = tk.Frame(body, bg=BG_DARK, highlightbackground=BORDER_COLOR, highlightthickness=2)
        hero.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 8))
        self.hero_frame = hero

        self.lbl_headline = tk.Label(hero, text="", font=FONT_MD, fg=TEXT_DIM, bg=BG_DARK)
        self.lbl_headline.pack(pady=(40, 0))
        self.lbl_hero_name = tk.Label(hero, text="Initializing...", font=FONT_HERO, fg=ACCENT_BLUE, bg=BG_DARK)
        self.lbl_hero_name.pack()
        self.lbl_counter = tk.Label(hero, text="", font=FONT_COUNTER, fg=TEXT_WHITE, bg=BG_DARK)
        self.lbl_counter.pack(expand=True)
        self.lbl_caption = tk.Label(hero, text="", font=FONT_MD, fg=TEXT_WHITE, bg=BG_DARK)
        self.lbl_caption.pack(pady=(0, 40))

        # ── prayer list ───────────────────────────────────────────────────
        self.list_frame = tk.Frame(body, bg=BG_DARK, highlightbackground=BORDER_COLOR, highlightthickness=2)
        self.list_frame.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True, padx=(8, 0))

        head = tk.Frame(self.list_frame, bg=BG_DARK)
        head.pack(fill=tk.X, padx=16, pady=(16, 8))
        for text, side in (("NAMAZ", tk.LEFT), ("JAMAT", tk.RIGHT), ("AZAN", tk.RIGHT)):
            tk.Label(head, text=text, font=FONT_SM, fg=TEXT_DIM, bg=BG_DARK, width=10).pack(side=side)

        self.prayer_rows: dict = {}   # PrayerName -> dict of label widgets
        self._build_prayer_rows()

        # ── diagnostic panel (hidden until the schedule fails) ────────────
        self.error_frame = tk.Frame(self.list_frame, bg=BG_DARK)
        tk.Label(self.error_frame, text="DATA MISSING", font=FONT_LG, fg=TEXT_RED, bg=BG_DARK).pack(pady=(40, 8))
        self.lbl_error = tk.Label(self.error_frame, text="", font=FONT_SM, fg=TEXT_DIM, bg=BG_DARK, wraplength=600)
        self.lbl_error.pack()

    def _build_prayer_rows(self):
        """Create one row per prayer; Taraweeh is packed only when scheduled."""
        for name in PRAYER_ORDER:
            row = tk.Frame(self.list_frame, bg=BG_DARK, pady=6)
            lbl_badge = tk.Label(row, text="", font=FONT_SM, fg=ACCENT_BLUE, bg=BG_DARK, width=5)
            lbl_badge.pack(side=tk.LEFT)
            lbl_name = tk.Label(row, text=PRAYER_DISPLAY[name], font=FONT_MD, fg=TEXT_WHITE, bg=BG_DARK, anchor="w", width=10)
            lbl_name.pack(side=tk.LEFT, padx=4)
            lbl_jamat = tk.Label(row, text="--:--", font=FONT_MD, fg=TEXT_WHITE, bg=BG_DARK, anchor="e", width=9)
            lbl_jamat.pack(side=tk.RIGHT, padx=4)
            lbl_azan = tk.Label(row, text="--:--", font=FONT_MD, fg=TEXT_WHITE, bg=BG_DARK, anchor="e", width=9)
            lbl_azan.pack(side=tk.RIGHT, padx=4)

            self.prayer_rows[name] = {
                "row": row,
                "lbl_badge": lbl_badge,
                "lbl_name": lbl_name,
                "lbl_azan": lbl_azan,
                "lbl_jamat": lbl_jamat,
            }

    # ──────────────────────────────────────────────────────────────────────
    # Data loading (runs in background thread)
    # ──────────────────────────────────────────────────────────────────────
    def _start_data_load(self):
        t = threading.Thread(target=self._load_data, daemon=True)
        t.start()

    def _load_data(self):
        """Load settings + prayer times in a background thread."""
        settings = load_settings()
        try:
            tz = pytz.timezone(settings["location"]["timezone"])
        except pytz.UnknownTimeZoneError:
            tz = pytz.utc
        date = self._clock(tz).date()
        prayer_set, fetched = load_schedule(settings, date)
        hijri = fetched["hijri"] if fetched else {}
        self.root.after(0, lambda: self._on_data_loaded(date, settings, tz, prayer_set, hijri))

    def _on_data_loaded(self, date: datetime.date, settings: dict, tz, prayer_set: PrayerSet, hijri: dict):
        """
        Called in main thread once data is ready.

        Loads can overlap; a result for an older date than the one on
        screen is dropped.
        """
        if self._loaded_for is not None and date < self._loaded_for:
            logger.info("Dropping schedule for %s, %s is already loaded", date, self._loaded_for)
            return
        self.settings = settings
        self.tz = tz
        self.prayer_set = prayer_set
        self.hijri = hijri
        self._loaded_for = date

        self._show_schedule(settings, prayer_set)
        self.ticker.update(
            prayer_set=prayer_set,
            logic=logic_config_from(settings),
            taraweeh=taraweeh_config_from(settings),
        )

    def _show_schedule(self, settings: dict, prayer_set: PrayerSet):
        """Fill the header and the prayer list, or show the diagnostic panel."""
        title = header_titles(settings)
        self.lbl_masjid.config(text=title["masjid_name"])
        self.lbl_sub_location.config(text=title["sub_location"])

        if prayer_set.available:
            self.error_frame.pack_forget()
            for name, widgets in self.prayer_rows.items():
                prayer = prayer_set.get(name)
                if prayer is None:
                    widgets["row"].pack_forget()
                    continue
                widgets["lbl_azan"].config(text=prayer.call_time_label)
                widgets["lbl_jamat"].config(text=prayer.congregation_time_label)
                widgets["row"].pack(fill=tk.X, padx=16, pady=4)
        else:
            for widgets in self.prayer_rows.values():
                widgets["row"].pack_forget()
            self.lbl_error.config(text=prayer_set.error)
            self.error_frame.pack(fill=tk.BOTH, expand=True)

    def _schedule_reload_checks(self):
        self.root.after(RELOAD_MS, self._hourly_reload)
        self.root.after(DAY_CHECK_MS, self._check_day_rollover)

    def _hourly_reload(self):
        self._start_data_load()
        self.root.after(RELOAD_MS, self._hourly_reload)

    def _check_day_rollover(self):
        today = self._now().date()
        if (
            self._loaded_for is not None
            and today > self._loaded_for
            and self._requested_for != today
        ):
            logger.info("Calendar day changed, reloading schedule for %s", today)
            self._requested_for = today
            self._start_data_load()
        self.root.after(DAY_CHECK_MS, self._check_day_rollover)

    # ──────────────────────────────────────────────────────────────────────
    # Rendering (ticker listener, runs every second)
    # ──────────────────────────────────────────────────────────────────────
    def _render(self, state):
        now = self.ticker.evaluated_at or self._now()
        self.lbl_clock.config(text=now.strftime("%H:%M:%S"))
        self.lbl_date.config(text=now.strftime("%A, %d %B %Y"))
        if self.hijri:
            hijri = self.hijri
            self.lbl_hijri.config(text=f"{hijri['day']} {hijri['month_name']} {hijri['year']} AH")

        if state is None:
            waiting = self.prayer_set is None
            self.lbl_headline.config(text="")
            self.lbl_hero_name.config(text="Initializing..." if waiting else "Schedule unavailable")
            self.lbl_counter.config(text="")
            self.lbl_caption.config(text="")
            return

        text = hero_text(state)
        self.lbl_headline.config(text=text["headline"])
        self.lbl_hero_name.config(text=text["name"])
        self.lbl_counter.config(text=text["counter"])
        self.lbl_caption.config(text=text["caption"])

        # Same snapshot the hero state was resolved from
        ticker = self.ticker
        badges = list_badges(ticker.prayer_set, state, ticker.logic, ticker.taraweeh, now)
        for name, widgets in self.prayer_rows.items():
            badge = badges.get(name, "")
            row_bg = BG_HIGHLIGHT if badge else BG_DARK
            fg = ACCENT_BLUE if badge else TEXT_WHITE
            widgets["lbl_badge"].config(text=badge, bg=row_bg)
            widgets["row"].config(bg=row_bg)
            for key in ("lbl_name", "lbl_azan", "lbl_jamat"):
                widgets[key].config(bg=row_bg, fg=fg)


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────
def main():
    logging.basicConfig(
        level=os.environ.get("NAMAZ_KIOSK_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    root = tk.Tk()
    NamazKioskApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
