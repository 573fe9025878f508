"""Built-in base pricing catalog.

Prices are quoted for a reference event of 100 attendees and an 8-hour day
at moderate-cost locations, before seasonal adjustment. Used to seed the
service_pricing table and as the default catalog for tests and local runs.
"""

# Service categories planned for each event type, in display order
EVENT_SERVICE_CATEGORIES: dict[str, list[str]] = {
    "wedding": [
        "venue", "catering", "photography", "videography",
        "music", "flowers", "decorations", "transportation",
    ],
    "corporate": ["venue", "catering", "av_equipment", "photography", "staffing", "security"],
    "conference": ["venue", "catering", "av_equipment", "staffing", "security", "transportation"],
    "birthday": ["venue", "catering", "entertainment", "decorations", "photography"],
    "party": ["venue", "catering", "music", "decorations", "security"],
    "anniversary": ["venue", "catering", "music", "flowers", "photography"],
    "graduation": ["venue", "catering", "decorations", "photography", "music"],
}

# event_type -> category -> (min, average, max, source, observed_at)
BASE_PRICING: dict[str, dict[str, tuple[int, int, int, str, str]]] = {
    "wedding": {
        "venue": (3000, 6000, 12000, "market_survey", "2026-03-01"),
        "catering": (3000, 5000, 8000, "market_survey", "2026-03-01"),
        "photography": (1500, 2800, 5000, "vendor_quotes", "2026-02-15"),
        "videography": (1200, 2400, 4500, "vendor_quotes", "2026-02-15"),
        "music": (800, 1500, 3000, "historical_bookings", "2025-11-20"),
        "flowers": (700, 1500, 3500, "industry_report", "2025-09-01"),
        "decorations": (500, 1200, 3000, "industry_report", "2025-09-01"),
        "transportation": (400, 900, 2000, "platform_estimate", "2025-06-01"),
    },
    "corporate": {
        "venue": (2000, 4500, 9000, "market_survey", "2026-03-01"),
        "catering": (2500, 4000, 7000, "market_survey", "2026-03-01"),
        "av_equipment": (800, 1800, 4000, "vendor_quotes", "2026-01-10"),
        "photography": (600, 1200, 2500, "vendor_quotes", "2026-01-10"),
        "staffing": (900, 1600, 3000, "historical_bookings", "2025-12-01"),
        "security": (500, 1000, 2000, "historical_bookings", "2025-12-01"),
    },
    "conference": {
        "venue": (4000, 8000, 15000, "market_survey", "2026-03-01"),
        "catering": (3000, 5500, 9000, "market_survey", "2026-03-01"),
        "av_equipment": (1500, 3500, 7000, "vendor_quotes", "2026-01-10"),
        "staffing": (1200, 2200, 4000, "historical_bookings", "2025-12-01"),
        "security": (800, 1500, 3000, "historical_bookings", "2025-12-01"),
        "transportation": (600, 1400, 3000, "platform_estimate", "2025-06-01"),
    },
    "birthday": {
        "venue": (300, 900, 2500, "historical_bookings", "2026-02-01"),
        "catering": (600, 1500, 3000, "market_survey", "2026-03-01"),
        "entertainment": (300, 700, 1500, "vendor_quotes", "2026-01-20"),
        "decorations": (150, 400, 1000, "platform_estimate", "2025-08-15"),
        "photography": (300, 600, 1200, "vendor_quotes", "2026-01-20"),
    },
    "party": {
        "venue": (500, 1200, 3000, "historical_bookings", "2026-02-01"),
        "catering": (800, 1800, 3500, "market_survey", "2026-03-01"),
        "music": (400, 900, 2000, "vendor_quotes", "2026-01-20"),
        "decorations": (200, 500, 1200, "platform_estimate", "2025-08-15"),
        "security": (300, 600, 1200, "historical_bookings", "2025-12-01"),
    },
    "anniversary": {
        "venue": (800, 2000, 5000, "historical_bookings", "2026-02-01"),
        "catering": (1000, 2500, 5000, "market_survey", "2026-03-01"),
        "music": (400, 1000, 2200, "vendor_quotes", "2026-01-20"),
        "flowers": (300, 700, 1500, "industry_report", "2025-09-01"),
        "photography": (500, 1100, 2200, "vendor_quotes", "2026-01-20"),
    },
    "graduation": {
        "venue": (400, 1100, 3000, "historical_bookings", "2026-02-01"),
        "catering": (700, 1600, 3200, "market_survey", "2026-03-01"),
        "decorations": (150, 450, 1100, "platform_estimate", "2025-08-15"),
        "photography": (300, 700, 1500, "vendor_quotes", "2026-01-20"),
        "music": (300, 700, 1600, "vendor_quotes", "2026-01-20"),
    },
}

# Reliability of each pricing source (0-1)
SOURCE_RELIABILITY: dict[str, float] = {
    "market_survey": 0.95,
    "vendor_quotes": 0.90,
    "historical_bookings": 0.85,
    "industry_report": 0.75,
    "platform_estimate": 0.60,
    "manual": 0.40,
}

HOURLY_SERVICES: frozenset[str] = frozenset({
    "photography", "videography", "music", "entertainment",
    "security", "staffing", "av_equipment",
})

# Priced per event, not per head
FIXED_SIZE_SERVICES: frozenset[str] = frozenset({"venue"})
