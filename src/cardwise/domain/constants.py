"""Centralized constants for cardwise.

Scheduling bounds and analytics defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Difficulty (ease factor) ----------
MIN_DIFFICULTY = 1.3
MAX_DIFFICULTY = 2.5
INITIAL_DIFFICULTY = 2.5

# ---------- Intervals ----------
RESET_INTERVAL_DAYS = 1
FIRST_INTERVAL_DAYS = 1
GRADUATION_INTERVAL_DAYS = 6

# Interval ease is derived from difficulty: EASE_BASE + (d - 1) * EASE_SLOPE
EASE_BASE = 1.3
EASE_SLOPE = 0.3

# ---------- Performance (0-5 quality scale) ----------
MAX_PERFORMANCE = 5
PASSING_PERFORMANCE = 3

# ---------- Analytics ----------
WEEKLY_WINDOW_DAYS = 7
SECONDS_PER_DAY = 86400
