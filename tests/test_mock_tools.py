"""Tests for the sample flight and hotel search tools."""

from __future__ import annotations

import random

import pytest

from travel_agent.ai.tools import hotels as hotels_module
from travel_agent.ai.tools.base import ToolArgumentError
from travel_agent.ai.tools.flights import FlightSearchTool, generate_flights
from travel_agent.ai.tools.hotels import HotelSearchTool, count_nights, generate_hotels


class TestFlights:

    @pytest.mark.parametrize("seed", range(10))
    def test_three_to_five_sorted_by_price(self, seed):
        flights = generate_flights(random.Random(seed))
        assert 3 <= len(flights) <= 5
        prices = [f.price for f in flights]
        assert prices == sorted(prices)

    def test_class_multiplier(self):
        economy = generate_flights(random.Random(7), "economy")
        first = generate_flights(random.Random(7), "first")
        assert [f.price for f in first] == sorted(f.price for f in first)
        assert min(f.price for f in first) > min(f.price for f in economy)

    def test_round_trip_has_return_flights(self):
        tool = FlightSearchTool(random.Random(3))
        outbound, inbound = tool.search("economy", round_trip=True)
        assert outbound
        assert inbound

    def test_one_way_has_no_return_flights(self):
        _, inbound = FlightSearchTool(random.Random(3)).search("economy", round_trip=False)
        assert inbound == []

    @pytest.mark.asyncio
    async def test_execute_formats_results(self):
        tool = FlightSearchTool(random.Random(1))
        text = await tool.execute(
            origin="New York", destination="Paris", departure_date="2026-05-01", return_date="2026-05-10"
        )
        assert "Round-trip from New York to Paris" in text
        assert "## Outbound Flights" in text
        assert "## Return Flights" in text

    @pytest.mark.asyncio
    async def test_missing_arguments(self):
        with pytest.raises(ToolArgumentError):
            await FlightSearchTool(random.Random(1)).execute(origin="Paris")

    @pytest.mark.asyncio
    async def test_unknown_class(self):
        with pytest.raises(ToolArgumentError):
            await FlightSearchTool(random.Random(1)).execute(
                origin="A", destination="B", departure_date="2026-05-01", **{"class": "cargo"}
            )


class TestHotels:

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("budget", ["budget", "mid-range", "luxury"])
    def test_four_to_six_sorted_by_rating(self, seed, budget):
        hotels = generate_hotels(random.Random(seed), "Rome", budget, nights=3)
        assert 4 <= len(hotels) <= 6
        ratings = [h.rating for h in hotels]
        assert ratings == sorted(ratings, reverse=True)
        for hotel in hotels:
            assert hotel.total_price == hotel.price_per_night * 3

    def test_luxury_pricier_than_budget(self):
        budget = generate_hotels(random.Random(5), "Rome", "budget", nights=1)
        luxury = generate_hotels(random.Random(5), "Rome", "luxury", nights=1)
        assert max(h.price_per_night for h in budget) < min(h.price_per_night for h in luxury)

    def test_count_nights(self):
        assert count_nights("2026-05-01", "2026-05-04") == 3

    @pytest.mark.parametrize("check_in,check_out", [
        ("2026-05-04", "2026-05-01"),
        ("2026-05-01", "2026-05-01"),
        ("not-a-date", "2026-05-01"),
    ])
    def test_invalid_nights(self, check_in, check_out):
        with pytest.raises(ToolArgumentError):
            count_nights(check_in, check_out)

    def test_unknown_budget_range(self):
        with pytest.raises(ToolArgumentError):
            HotelSearchTool(random.Random(1)).search("Rome", "2026-05-01", "2026-05-03", "backpacker")

    @pytest.mark.asyncio
    async def test_execute_formats_results(self):
        text = await HotelSearchTool(random.Random(2)).execute(
            location="Lisbon", check_in="2026-06-01", check_out="2026-06-03"
        )
        assert "Hotel Search Results for Lisbon" in text
        assert "**Duration:** 2 nights" in text
        assert "Mid-range" in text

    def test_search_returns_stay_length(self):
        hotels, nights = HotelSearchTool(random.Random(3)).search("Rome", "2026-05-01", "2026-05-05", "luxury")
        assert nights == 4
        for hotel in hotels:
            assert hotel.total_price == hotel.price_per_night * 4

    @pytest.mark.asyncio
    async def test_execute_parses_dates_once(self, monkeypatch):
        calls = []

        def counting(check_in, check_out):
            calls.append((check_in, check_out))
            return count_nights(check_in, check_out)

        monkeypatch.setattr(hotels_module, "count_nights", counting)
        await HotelSearchTool(random.Random(2)).execute(
            location="Lisbon", check_in="2026-06-01", check_out="2026-06-03"
        )
        assert calls == [("2026-06-01", "2026-06-03")]
