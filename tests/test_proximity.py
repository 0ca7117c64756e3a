"""Tests for nearest-location matching."""

from __future__ import annotations

import asyncio

import pytest

from anidex.services.proximity import (
    bounding_box,
    clamp_search_radius,
    find_or_create_location,
    locations_within,
    nearest_location,
)
from anidex.services.scoring import haversine_distance
from conftest import FakeLocationStore, make_location


class TestFindOrCreateLocation:
    """Test resolving a sighting to a location."""

    def test_empty_store_creates(self) -> None:
        """With no candidates a new location is created with zero counters."""
        store = FakeLocationStore()
        location, created = asyncio.run(find_or_create_location(store, 10.0, 10.0))

        assert created is True
        assert store.inserted == [location]
        assert (location.latitude, location.longitude) == (10.0, 10.0)
        assert location.catch_count == 0
        assert location.species_count == 0
        assert location.user_count == 0
        assert location.last_catch_at is None

    def test_same_point_matches(self) -> None:
        """A sighting on top of an existing location reuses it unchanged."""
        existing = make_location(10.0, 10.0, catch_count=4, species_count=2, user_count=3)
        store = FakeLocationStore([existing])

        location, created = asyncio.run(find_or_create_location(store, 10.0, 10.0, 0.1))

        assert created is False
        assert location is existing
        assert (location.latitude, location.longitude) == (10.0, 10.0)
        assert location.catch_count == 4
        assert store.inserted == []

    def test_far_point_creates(self) -> None:
        """A sighting 50 km away is outside a 10 km radius."""
        existing = make_location(10.0, 10.0)
        store = FakeLocationStore([existing])
        lat = 10.0 + 50.0 / 111.195

        location, created = asyncio.run(find_or_create_location(store, lat, 10.0, 10.0))

        assert created is True
        assert location is not existing
        assert len(store.locations) == 2

    def test_nearest_candidate_wins(self) -> None:
        far = make_location(10.0, 10.0005)
        near = make_location(10.0, 10.0001)
        store = FakeLocationStore([far, near])

        location, created = asyncio.run(find_or_create_location(store, 10.0, 10.0))

        assert created is False
        assert location is near

    def test_tie_goes_to_first_candidate(self) -> None:
        """Equidistant candidates resolve to the earliest one."""
        east = make_location(0.0, 0.0005)
        west = make_location(0.0, -0.0005)
        store = FakeLocationStore([east, west])

        location, _ = asyncio.run(find_or_create_location(store, 0.0, 0.0))
        assert location is east

        store = FakeLocationStore([west, east])
        location, _ = asyncio.run(find_or_create_location(store, 0.0, 0.0))
        assert location is west

    def test_explicit_candidates_override_store(self) -> None:
        """Only the given candidates are considered."""
        in_store = make_location(10.0, 10.0)
        store = FakeLocationStore([in_store])

        location, created = asyncio.run(find_or_create_location(store, 10.0, 10.0, candidates=[]))

        assert created is True
        assert location is not in_store

    def test_boundary_distance_matches(self) -> None:
        """A candidate exactly at the radius still matches."""
        existing = make_location(0.0, 0.0)
        store = FakeLocationStore([existing])
        radius = haversine_distance(0.0, 0.0, 0.0005, 0.0)

        location, created = asyncio.run(find_or_create_location(store, 0.0005, 0.0, radius))

        assert created is False
        assert location is existing


class TestNearestLocation:
    """Test the pure nearest-candidate search."""

    def test_none_for_empty(self) -> None:
        assert nearest_location([], 0.0, 0.0, 1.0) is None

    def test_none_when_out_of_range(self) -> None:
        assert nearest_location([make_location(1.0, 1.0)], 0.0, 0.0, 1.0) is None

    def test_returns_distance(self) -> None:
        candidate = make_location(1.0, 0.0)
        location, distance = nearest_location([candidate], 0.0, 0.0, 200.0)
        assert location is candidate
        assert distance == pytest.approx(111.195, abs=0.01)


class TestLocationsWithin:
    """Test the nearby listing."""

    def test_sorted_nearest_first(self) -> None:
        a = make_location(0.0, 0.05)
        b = make_location(0.0, 0.01)
        c = make_location(0.0, 0.03)
        assert locations_within([a, b, c], 0.0, 0.0, 10.0) == [b, c, a]

    def test_excludes_outside_radius(self) -> None:
        inside = make_location(0.0, 0.05)
        outside = make_location(1.0, 1.0)
        assert locations_within([outside, inside], 0.0, 0.0, 10.0) == [inside]


class TestClampSearchRadius:
    """Test radius defaults and caps."""

    @pytest.mark.parametrize(
        ("radius", "expected"),
        [(None, 10.0), (0, 10.0), (-5, 10.0), (2.5, 2.5), (100, 100.0), (500, 100.0)],
    )
    def test_clamp(self, radius: float | None, expected: float) -> None:
        assert clamp_search_radius(radius) == expected

    def test_custom_limits(self) -> None:
        assert clamp_search_radius(None, 5.0, 20.0) == 5.0
        assert clamp_search_radius(50.0, 5.0, 20.0) == 20.0


class TestBoundingBox:
    """Test the candidate prefilter box."""

    def test_contains_points_at_radius(self) -> None:
        box = bounding_box(45.0, 7.0, 10.0)
        assert box.min_lat < 45.0 < box.max_lat
        assert box.min_lng < 7.0 < box.max_lng
        assert not box.spans_all_longitudes
        assert haversine_distance(45.0, 7.0, box.max_lat, 7.0) == pytest.approx(10.0, abs=1e-6)
        # The widest longitude reach is slightly poleward, so the box edge is at least radius away
        assert haversine_distance(45.0, 7.0, 45.0, box.max_lng) >= 10.0

    def test_pole_covers_all_longitudes(self) -> None:
        box = bounding_box(89.99, 0.0, 10.0)
        assert box.spans_all_longitudes
        assert box.max_lat == 90.0

    def test_antimeridian_covers_all_longitudes(self) -> None:
        box = bounding_box(0.0, 179.99, 10.0)
        assert box.spans_all_longitudes
