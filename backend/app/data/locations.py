"""Static location cost classification.

Used for:
- Location cost multipliers (LocationAdjuster)
- Nearest-metro fallback when only coordinates are known
"""

# Cost categories: "high_cost", "moderate_high_cost", "moderate_cost", "low_cost"
CITY_COST_CATEGORIES: dict[str, str] = {
    # North America — major metros
    "new york": "high_cost",
    "san francisco": "high_cost",
    "los angeles": "high_cost",
    "boston": "high_cost",
    "washington": "high_cost",
    "seattle": "high_cost",
    "honolulu": "high_cost",
    "toronto": "high_cost",
    "vancouver": "high_cost",
    # North America — second-tier metros
    "chicago": "moderate_high_cost",
    "miami": "moderate_high_cost",
    "san diego": "moderate_high_cost",
    "denver": "moderate_high_cost",
    "austin": "moderate_high_cost",
    "philadelphia": "moderate_high_cost",
    "portland": "moderate_high_cost",
    "montreal": "moderate_high_cost",
    "calgary": "moderate_high_cost",
    # North America — regional centers
    "atlanta": "moderate_cost",
    "dallas": "moderate_cost",
    "houston": "moderate_cost",
    "phoenix": "moderate_cost",
    "nashville": "moderate_cost",
    "charlotte": "moderate_cost",
    "minneapolis": "moderate_cost",
    "ottawa": "moderate_cost",
    "edmonton": "moderate_cost",
    "winnipeg": "moderate_cost",
    "halifax": "moderate_cost",
    # Europe
    "london": "high_cost",
    "paris": "high_cost",
    "zurich": "high_cost",
    "geneva": "high_cost",
    "dublin": "moderate_high_cost",
    "amsterdam": "moderate_high_cost",
    "munich": "moderate_high_cost",
    "barcelona": "moderate_high_cost",
    "milan": "moderate_high_cost",
    "manchester": "moderate_cost",
    "edinburgh": "moderate_cost",
    "lisbon": "moderate_cost",
    "madrid": "moderate_cost",
    # Asia-Pacific
    "tokyo": "high_cost",
    "singapore": "high_cost",
    "hong kong": "high_cost",
    "sydney": "high_cost",
    "melbourne": "moderate_high_cost",
    "auckland": "moderate_high_cost",
    "brisbane": "moderate_cost",
    "perth": "moderate_cost",
}

# Regions cover areas without a listed city (state / province / area names)
REGION_COST_CATEGORIES: dict[str, str] = {
    "manhattan": "high_cost",
    "bay area": "high_cost",
    "silicon valley": "high_cost",
    "greater london": "high_cost",
    "long island": "moderate_high_cost",
    "orange county": "moderate_high_cost",
    "napa valley": "moderate_high_cost",
    "hamptons": "high_cost",
    "california": "moderate_high_cost",
    "massachusetts": "moderate_high_cost",
    "new jersey": "moderate_high_cost",
    "hawaii": "moderate_high_cost",
    "british columbia": "moderate_high_cost",
    "ontario": "moderate_cost",
    "quebec": "moderate_cost",
    "texas": "moderate_cost",
    "florida": "moderate_cost",
    "colorado": "moderate_cost",
    "illinois": "moderate_cost",
    "georgia": "moderate_cost",
    "alabama": "low_cost",
    "arkansas": "low_cost",
    "iowa": "low_cost",
    "kansas": "low_cost",
    "kentucky": "low_cost",
    "mississippi": "low_cost",
    "montana": "low_cost",
    "nebraska": "low_cost",
    "north dakota": "low_cost",
    "oklahoma": "low_cost",
    "south dakota": "low_cost",
    "west virginia": "low_cost",
    "wyoming": "low_cost",
    "saskatchewan": "low_cost",
    "manitoba": "low_cost",
    "new brunswick": "low_cost",
    "newfoundland": "low_cost",
    "rural": "low_cost",
    "countryside": "low_cost",
}

# Metro centers for the proximity fallback: name -> (lat, lng)
METRO_COORDINATES: dict[str, tuple[float, float]] = {
    "new york": (40.7128, -74.0060),
    "san francisco": (37.7749, -122.4194),
    "los angeles": (34.0522, -118.2437),
    "boston": (42.3601, -71.0589),
    "washington": (38.9072, -77.0369),
    "seattle": (47.6062, -122.3321),
    "toronto": (43.6532, -79.3832),
    "vancouver": (49.2827, -123.1207),
    "chicago": (41.8781, -87.6298),
    "miami": (25.7617, -80.1918),
    "san diego": (32.7157, -117.1611),
    "denver": (39.7392, -104.9903),
    "austin": (30.2672, -97.7431),
    "montreal": (45.5019, -73.5674),
    "atlanta": (33.7490, -84.3880),
    "dallas": (32.7767, -96.7970),
    "houston": (29.7604, -95.3698),
    "london": (51.5074, -0.1278),
    "paris": (48.8566, 2.3522),
    "tokyo": (35.6762, 139.6503),
    "sydney": (-33.8688, 151.2093),
    "melbourne": (-37.8136, 144.9631),
}

# Per-service secondary multiplier by cost category. Services absent here use 1.0.
# Venue and transport track local rents/wages closely; stock goods barely move.
SERVICE_LOCATION_ADJUSTMENTS: dict[str, dict[str, float]] = {
    "venue": {
        "high_cost": 1.10,
        "moderate_high_cost": 1.05,
        "moderate_cost": 1.00,
        "low_cost": 0.95,
    },
    "transportation": {
        "high_cost": 1.05,
        "moderate_high_cost": 1.02,
        "moderate_cost": 1.00,
        "low_cost": 0.98,
    },
    "decorations": {
        "high_cost": 0.90,
        "moderate_high_cost": 0.95,
        "moderate_cost": 1.00,
        "low_cost": 1.10,
    },
    "invitations": {
        "high_cost": 0.85,
        "moderate_high_cost": 0.92,
        "moderate_cost": 1.00,
        "low_cost": 1.15,
    },
    "rentals": {
        "high_cost": 0.95,
        "moderate_high_cost": 0.98,
        "moderate_cost": 1.00,
        "low_cost": 1.05,
    },
}

# ISO 3166-1 alpha-2 codes that use the southern-hemisphere season calendar
SOUTHERN_HEMISPHERE_COUNTRIES: frozenset[str] = frozenset({
    "AU", "NZ", "ZA", "AR", "CL", "UY", "PY", "BR",
})
