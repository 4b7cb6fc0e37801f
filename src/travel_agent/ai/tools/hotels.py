"""Mock hotel search. Like the flight tool, results are sample data."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import Any

from travel_agent.ai.tools.base import Tool, ToolArgumentError

HOTEL_CHAINS = {
    "budget": ["Holiday Inn Express", "Best Western", "Comfort Inn", "Ibis", "Premier Inn"],
    "mid-range": ["Holiday Inn", "Marriott", "Hilton Garden Inn", "Courtyard", "Radisson"],
    "luxury": ["Four Seasons", "Ritz-Carlton", "St. Regis", "Waldorf Astoria", "Park Hyatt"],
}
AMENITIES = {
    "budget": ["Free WiFi", "Breakfast included", "Fitness center", "24-hour front desk", "Air conditioning"],
    "mid-range": ["Free WiFi", "Restaurant", "Bar", "Fitness center", "Business center", "Pool", "Room service"],
    "luxury": [
        "Concierge service", "Spa", "Fine dining restaurant", "Room service",
        "Butler service", "Pool", "Valet parking", "Premium WiFi",
    ],
}
ROOM_TYPES = {
    "budget": ["Standard Room", "Queen Room", "Double Room"],
    "mid-range": ["Deluxe Room", "Executive Room", "Junior Suite"],
    "luxury": ["Executive Suite", "Premium Suite", "Presidential Suite"],
}
DESCRIPTIONS = {
    "budget": [
        "Clean and comfortable accommodations with essential amenities.",
        "Modern rooms designed for budget-conscious travelers.",
        "Simple, well-maintained hotel perfect for short stays.",
    ],
    "mid-range": [
        "Stylish hotel combining comfort with excellent service.",
        "Modern accommodations with business-friendly amenities.",
        "Well-appointed rooms in a convenient location.",
    ],
    "luxury": [
        "Exceptional luxury with world-class service and amenities.",
        "Elegant accommodations offering the finest hospitality.",
        "Prestigious hotel known for impeccable service and style.",
    ],
}
# (min, spread) bands for rating and nightly price
RATING_BANDS = {"budget": (3.0, 1.5), "mid-range": (3.5, 1.5), "luxury": (4.2, 0.8)}
PRICE_BANDS = {"budget": (40, 80), "mid-range": (80, 120), "luxury": (300, 500)}


@dataclass(frozen=True, slots=True)
class Hotel:
    name: str
    rating: float
    reviews: int
    area: str
    price_per_night: int
    total_price: int
    amenities: tuple[str, ...]
    room_type: str
    description: str


def count_nights(check_in: str, check_out: str) -> int:
    try:
        start = date.fromisoformat(check_in)
        end = date.fromisoformat(check_out)
    except (TypeError, ValueError) as e:
        raise ToolArgumentError("check_in and check_out must be YYYY-MM-DD dates") from e
    nights = (end - start).days
    if nights < 1:
        raise ToolArgumentError("check_out must be after check_in")
    return nights


def generate_hotels(rng: random.Random, location: str, budget_range: str, nights: int) -> list[Hotel]:
    """Generate 4-6 hotels sorted by descending rating."""
    areas = [
        f"Downtown {location}", f"{location} City Center", f"{location} Business District",
        f"Historic {location}", f"{location} Airport Area",
    ]
    rating_min, rating_spread = RATING_BANDS[budget_range]
    price_min, price_spread = PRICE_BANDS[budget_range]

    hotels = []
    for _ in range(rng.randint(4, 6)):
        price_per_night = int(price_min + rng.random() * price_spread)
        amenities = rng.sample(AMENITIES[budget_range], k=min(len(AMENITIES[budget_range]), rng.randint(4, 6)))
        hotels.append(Hotel(
            name=f"{rng.choice(HOTEL_CHAINS[budget_range])} {location}",
            rating=round(rating_min + rng.random() * rating_spread, 1),
            reviews=rng.randint(100, 2099),
            area=rng.choice(areas),
            price_per_night=price_per_night,
            total_price=price_per_night * nights,
            amenities=tuple(amenities),
            room_type=rng.choice(ROOM_TYPES[budget_range]),
            description=rng.choice(DESCRIPTIONS[budget_range]),
        ))

    return sorted(hotels, key=lambda h: h.rating, reverse=True)


class HotelSearchTool(Tool):
    """Sample hotel listings for a location and date range."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "search_hotels"

    @property
    def description(self) -> str:
        return "Search for hotels and accommodations with pricing, ratings, and amenities"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": 'City or location to search for hotels (e.g., "Paris", "New York", "London")',
                },
                "check_in": {"type": "string", "description": "Check-in date in YYYY-MM-DD format"},
                "check_out": {"type": "string", "description": "Check-out date in YYYY-MM-DD format"},
                "guests": {"type": "integer", "description": "Number of guests (default: 2)"},
                "rooms": {"type": "integer", "description": "Number of rooms (default: 1)"},
                "budget_range": {
                    "type": "string",
                    "enum": ["budget", "mid-range", "luxury"],
                    "description": "Budget preference (budget, mid-range, luxury)",
                },
            },
            "required": ["location", "check_in", "check_out"],
        }

    @property
    def service_key(self) -> str:
        return "hotels"

    def search(
        self, location: str, check_in: str, check_out: str, budget_range: str = "mid-range"
    ) -> tuple[list[Hotel], int]:
        """Hotels for the stay along with its length in nights."""
        if budget_range not in HOTEL_CHAINS:
            raise ToolArgumentError(f"Unknown budget range: {budget_range}")
        nights = count_nights(check_in, check_out)
        return generate_hotels(self._rng, location, budget_range, nights), nights

    async def execute(self, **kwargs: Any) -> str:
        location = kwargs.get("location")
        check_in = kwargs.get("check_in")
        check_out = kwargs.get("check_out")
        if not location or not check_in or not check_out:
            raise ToolArgumentError("location, check_in and check_out are required")
        guests = kwargs.get("guests") or 2
        rooms = kwargs.get("rooms") or 1
        budget_range = kwargs.get("budget_range") or "mid-range"

        hotels, nights = self.search(location, check_in, check_out, budget_range)

        parts = [
            f"🏨 **Hotel Search Results for {location}**\n",
            f"**Check-in:** {check_in}",
            f"**Check-out:** {check_out}",
            f"**Duration:** {nights} night{'s' if nights > 1 else ''}",
            f"**Guests:** {guests} | **Rooms:** {rooms}",
            f"**Budget Range:** {budget_range.capitalize()}",
            "\n---",
        ]
        for index, hotel in enumerate(hotels, 1):
            amenities = "\n".join(f"• {a}" for a in hotel.amenities)
            parts.append(
                f"\n## {index}. **{hotel.name}**\n"
                f"⭐ **Rating:** {hotel.rating}/5 ({hotel.reviews} reviews)\n"
                f"📍 **Location:** {hotel.area}\n"
                f"💰 **Price:** ${hotel.price_per_night}/night • **Total: ${hotel.total_price}**\n\n"
                f"**Amenities:**\n{amenities}\n\n"
                f"**Room Type:** {hotel.room_type}\n"
                f"**Description:** {hotel.description}"
            )

        parts += [
            "\n## 💡 **Booking Tips:**",
            "• Prices may vary based on exact dates and availability",
            "• Book directly with hotels for best rates and benefits",
            "• Check cancellation policies before booking",
            "• Read recent reviews for current conditions",
            "",
            "*Note: These are sample results. For real bookings, please check hotel websites "
            "or booking platforms.*",
        ]
        return "\n".join(parts)
