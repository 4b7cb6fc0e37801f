"""Mock flight search.

No airline API is wired in: results are generated from the injected random
source. Only their shape is meaningful (3-5 options per leg, cheapest first).
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

from travel_agent.ai.tools.base import Tool, ToolArgumentError

AIRLINES = [
    "American Airlines", "Delta Air Lines", "United Airlines", "British Airways",
    "Lufthansa", "Air France", "Emirates", "Singapore Airlines",
]
AIRCRAFT = ["Boeing 737", "Airbus A320", "Boeing 777", "Airbus A350", "Boeing 787", "Airbus A380"]
CLASS_MULTIPLIER = {"economy": 1, "business": 3, "first": 5}


@dataclass(frozen=True, slots=True)
class Flight:
    airline: str
    aircraft: str
    departure_time: str
    arrival_time: str
    duration: str
    price: int
    stops: int


def generate_flights(rng: random.Random, flight_class: str = "economy") -> list[Flight]:
    """Generate 3-5 flight options sorted by ascending price."""
    multiplier = CLASS_MULTIPLIER.get(flight_class, 1)
    flights = []
    for _ in range(rng.randint(3, 5)):
        stops = 0 if rng.random() < 0.6 else rng.randint(1, 2)

        dep_hour = rng.randint(4, 23)
        dep_minute = rng.choice([0, 30])
        dur_hours = rng.randint(2, 13) + stops * 2
        dur_minutes = rng.randint(0, 59)
        total_minutes = dep_hour * 60 + dep_minute + dur_hours * 60 + dur_minutes
        arr_hour, arr_minute = divmod(total_minutes % (24 * 60), 60)

        price = rng.randint(200, 999) * multiplier
        if stops:
            price *= 0.8

        flights.append(Flight(
            airline=rng.choice(AIRLINES),
            aircraft=rng.choice(AIRCRAFT),
            departure_time=f"{dep_hour:02d}:{dep_minute:02d}",
            arrival_time=f"{arr_hour:02d}:{arr_minute:02d}",
            duration=f"{dur_hours}h {dur_minutes}m",
            price=int(price),
            stops=stops,
        ))

    return sorted(flights, key=lambda f: f.price)


def _stops_label(stops: int) -> str:
    return "Non-stop" if stops == 0 else f"{stops} stop(s)"


class FlightSearchTool(Tool):
    """Sample flight options between two places."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "search_flights"

    @property
    def description(self) -> str:
        return "Search for flights between destinations with pricing and schedule information"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "origin": {
                    "type": "string",
                    "description": 'Departure city or airport code (e.g., "New York", "JFK", "London")',
                },
                "destination": {
                    "type": "string",
                    "description": 'Arrival city or airport code (e.g., "Paris", "CDG", "Tokyo")',
                },
                "departure_date": {"type": "string", "description": "Departure date in YYYY-MM-DD format"},
                "return_date": {
                    "type": "string",
                    "description": "Return date in YYYY-MM-DD format (optional for one-way flights)",
                },
                "passengers": {"type": "integer", "description": "Number of passengers (default: 1)"},
                "class": {
                    "type": "string",
                    "enum": ["economy", "business", "first"],
                    "description": "Flight class preference (economy, business, first)",
                },
            },
            "required": ["origin", "destination", "departure_date"],
        }

    @property
    def service_key(self) -> str:
        return "flights"

    def search(self, flight_class: str, round_trip: bool) -> tuple[list[Flight], list[Flight]]:
        outbound = generate_flights(self._rng, flight_class)
        inbound = generate_flights(self._rng, flight_class) if round_trip else []
        return outbound, inbound

    async def execute(self, **kwargs: Any) -> str:
        origin = kwargs.get("origin")
        destination = kwargs.get("destination")
        departure_date = kwargs.get("departure_date")
        if not origin or not destination or not departure_date:
            raise ToolArgumentError("origin, destination and departure_date are required")
        return_date = kwargs.get("return_date") or None
        passengers = kwargs.get("passengers") or 1
        flight_class = kwargs.get("class") or "economy"
        if flight_class not in CLASS_MULTIPLIER:
            raise ToolArgumentError(f"Unknown flight class: {flight_class}")

        outbound, inbound = self.search(flight_class, round_trip=return_date is not None)

        trip_type = "Round-trip" if return_date else "One-way"
        parts = [
            "✈️ **Flight Search Results**\n",
            f"**{trip_type} from {origin} to {destination}**",
            f"**Departure:** {departure_date}",
        ]
        if return_date:
            parts.append(f"**Return:** {return_date}")
        parts += [
            f"**Passengers:** {passengers}",
            f"**Class:** {flight_class.capitalize()}",
            "",
            "## Outbound Flights",
        ]
        for index, flight in enumerate(outbound, 1):
            parts.append(self._format_flight(index, flight, origin, destination, f"${flight.price} per person"))

        if inbound:
            parts += ["", "## Return Flights"]
            for index, flight in enumerate(inbound, 1):
                parts.append(self._format_flight(index, flight, destination, origin, "Included in round-trip pricing"))

        parts += [
            "",
            "## 💡 **Booking Tips:**",
            "• Prices shown are estimates and may vary",
            "• Book directly with airlines or use travel sites like Expedia, Kayak",
            "• Consider flexible dates for better prices",
            "• Check baggage policies and fees",
            "",
            "*Note: These are sample results. For real bookings, please check airline websites "
            "or travel booking platforms.*",
        ]
        return "\n".join(parts)

    @staticmethod
    def _format_flight(index: int, flight: Flight, origin: str, destination: str, price: str) -> str:
        return (
            f"\n**Option {index}:** {flight.airline}\n"
            f"🕐 **Departure:** {flight.departure_time} from {origin}\n"
            f"🕐 **Arrival:** {flight.arrival_time} at {destination}\n"
            f"✈️ **Aircraft:** {flight.aircraft}\n"
            f"⏱️ **Duration:** {flight.duration}\n"
            f"💰 **Price:** {price}\n"
            f"🔄 **Stops:** {_stops_label(flight.stops)}"
        )
