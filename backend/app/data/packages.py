"""Built-in package deals (bundles of service categories sold together)."""

# id -> deal definition; cities=None means available everywhere
PACKAGE_DEALS: dict[str, dict] = {
    "wedding-essentials": {
        "name": "Wedding Essentials",
        "description": "Venue, catering and music from one partner vendor network.",
        "service_categories": ["venue", "catering", "music"],
        "base_price": 12500,
        "discount_percentage": 12,
        "event_types": ["wedding"],
        "cities": None,
    },
    "wedding-memories": {
        "name": "Wedding Memories",
        "description": "Photography and videography by the same studio.",
        "service_categories": ["photography", "videography"],
        "base_price": 5200,
        "discount_percentage": 15,
        "event_types": ["wedding"],
        "cities": None,
    },
    "wedding-floral-decor": {
        "name": "Floral & Decor",
        "description": "Matching floral design and decorations.",
        "service_categories": ["flowers", "decorations"],
        "base_price": 2700,
        "discount_percentage": 10,
        "event_types": ["wedding"],
        "cities": None,
    },
    "corporate-production": {
        "name": "Corporate Production",
        "description": "AV equipment, event staff and photography under one contract.",
        "service_categories": ["av_equipment", "staffing", "photography"],
        "base_price": 4600,
        "discount_percentage": 18,
        "event_types": ["corporate"],
        "cities": None,
    },
    "conference-operations": {
        "name": "Conference Operations",
        "description": "AV, staffing and security for multi-room conferences.",
        "service_categories": ["av_equipment", "staffing", "security"],
        "base_price": 7200,
        "discount_percentage": 20,
        "event_types": ["conference"],
        "cities": None,
    },
    "party-starter": {
        "name": "Party Starter",
        "description": "Venue hire with music and decorations included.",
        "service_categories": ["venue", "music", "decorations"],
        "base_price": 2600,
        "discount_percentage": 15,
        "event_types": ["party", "graduation"],
        "cities": None,
    },
    "nyc-signature": {
        "name": "NYC Signature",
        "description": "Manhattan venue partners with in-house catering.",
        "service_categories": ["venue", "catering"],
        "base_price": 16000,
        "discount_percentage": 10,
        "event_types": ["wedding", "corporate"],
        "cities": ["new york"],
    },
}
