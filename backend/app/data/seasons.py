"""Static season calendars and special-date table for event demand pricing."""

# (start_month, start_day, end_month, end_day, season_type); ranges are inclusive
NORTHERN_SEASON_WINDOWS: list[tuple[int, int, int, int, str]] = [
    (1, 1, 2, 29, "off_peak"),
    (3, 1, 3, 31, "standard"),
    (4, 1, 5, 31, "shoulder"),
    (6, 1, 9, 30, "peak"),
    (10, 1, 10, 31, "shoulder"),
    (11, 1, 11, 30, "standard"),
    (12, 1, 12, 31, "peak"),
]

# Same tiers shifted six months; the summer peak wraps the year end
SOUTHERN_SEASON_WINDOWS: list[tuple[int, int, int, int, str]] = [
    (12, 1, 3, 31, "peak"),
    (4, 1, 4, 30, "shoulder"),
    (5, 1, 5, 31, "standard"),
    (6, 1, 6, 30, "peak"),
    (7, 1, 8, 31, "off_peak"),
    (9, 1, 9, 30, "standard"),
    (10, 1, 11, 30, "shoulder"),
]

SEASON_MULTIPLIERS: dict[str, float] = {
    "peak": 1.3,
    "shoulder": 1.1,
    "off_peak": 0.8,
    "standard": 1.0,
}

# (month, day): (multiplier, reason, countries or None for everywhere)
SPECIAL_DATES: dict[tuple[int, int], tuple[float, str, frozenset[str] | None]] = {
    (1, 1): (1.5, "New Year's Day", None),
    (2, 14): (1.25, "Valentine's Day", None),
    (7, 4): (1.3, "Independence Day", frozenset({"US"})),
    (10, 31): (1.15, "Halloween", None),
    (12, 24): (1.4, "Christmas Eve", None),
    (12, 25): (1.5, "Christmas Day", None),
    (12, 31): (1.6, "New Year's Eve", None),
}

PUBLIC_HOLIDAY_MULTIPLIER = 1.2
