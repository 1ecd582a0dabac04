"""Unit tests for the proximity (distance band) search engine."""

import math
from types import SimpleNamespace

import pytest

from locatemycity.domain.entities import (
    Coordinate,
    DistanceQuery,
    InvalidCoordinate,
    InvalidQueryParameter,
)
from locatemycity.domain.enums import DistanceUnit
from locatemycity.domain.geodesy import haversine_km, km_to_miles
from locatemycity.domain.proximity import (
    DEFAULT_RESULT_CAP,
    ProximitySearchEngine,
    find_places_near_distance,
)

from tests.conftest import LOS_ANGELES, SAN_DIEGO, make_place


def km_query(target, tol, origin=LOS_ANGELES):
    return DistanceQuery(origin, target, tol, DistanceUnit.KM)


class TestScenarios:
    def test_san_diego_is_180_km_from_los_angeles(self, california_places):
        results = find_places_near_distance(
            LOS_ANGELES, california_places, 180.0, 10.0, DistanceUnit.KM
        )
        names = [r.place.name for r in results]
        assert names == ["San Diego"]
        assert results[0].deviation <= 10.0

    def test_empty_dataset_yields_empty_list(self):
        assert find_places_near_distance(LOS_ANGELES, [], 100.0, 5.0) == []

    def test_nan_target_rejected(self, california_places):
        with pytest.raises(InvalidQueryParameter):
            find_places_near_distance(
                LOS_ANGELES, california_places, math.nan, 5.0
            )

    def test_tie_keeps_input_order(self):
        """Same coordinate => same deviation; input order decides."""
        first = make_place("Zeta Town", SAN_DIEGO)
        second = make_place("Alpha Town", SAN_DIEGO)
        results = find_places_near_distance(
            LOS_ANGELES, [first, second], 180.0, 10.0, DistanceUnit.KM
        )
        assert [r.place.name for r in results] == ["Zeta Town", "Alpha Town"]
        assert results[0].deviation == results[1].deviation

    def test_zero_tolerance_without_exact_match(self, california_places):
        assert (
            find_places_near_distance(
                LOS_ANGELES, california_places, 180.0, 0.0, DistanceUnit.KM
            )
            == []
        )


class TestBandAndRanking:
    def setup_method(self):
        self.engine = ProximitySearchEngine()

    def test_every_result_inside_band(self, california_places):
        query = km_query(300.0, 100.0)
        for r in self.engine.search(query, california_places):
            assert abs(r.distance_km - query.target_km) <= query.tolerance_km

    def test_sorted_by_deviation(self, california_places):
        # 300 km ± 200 km captures Santa Barbara, San Diego, Fresno and Las Vegas
        results = self.engine.search(km_query(300.0, 200.0), california_places)
        deviations = [r.deviation for r in results]
        assert deviations == sorted(deviations)
        assert [r.place.name for r in results] == [
            "Fresno",
            "Las Vegas",
            "San Diego",
            "Santa Barbara",
        ]

    def test_band_is_inclusive(self):
        d = haversine_km(LOS_ANGELES, SAN_DIEGO)
        place = make_place("San Diego", SAN_DIEGO)
        results = self.engine.search(km_query(d, 0.0), [place])
        assert len(results) == 1
        assert results[0].deviation == 0.0

    def test_origin_itself_matches_zero_target(self, california_places):
        results = self.engine.search(km_query(0.0, 1.0), california_places)
        assert [r.place.name for r in results] == ["Los Angeles"]
        assert results[0].distance_km == 0.0

    def test_miles_are_attached(self, california_places):
        results = self.engine.search(km_query(180.0, 10.0), california_places)
        r = results[0]
        assert r.distance_miles == pytest.approx(km_to_miles(r.distance_km))

    def test_miles_query_converted_to_km(self, california_places):
        # 180 km ~= 111.85 mi; ±5 mi ~= ±8 km still captures San Diego
        query = DistanceQuery(LOS_ANGELES, 111.85, 5.0, DistanceUnit.MI)
        results = self.engine.search(query, california_places)
        assert [r.place.name for r in results] == ["San Diego"]
        assert results[0].deviation == pytest.approx(
            abs(results[0].distance_km - query.target_km)
        )

    def test_accepts_any_iterable(self, california_places):
        results = self.engine.search(
            km_query(180.0, 10.0), (p for p in california_places)
        )
        assert len(results) == 1

    def test_deterministic(self, california_places):
        query = km_query(350.0, 250.0)
        assert self.engine.search(query, california_places) == self.engine.search(
            query, california_places
        )


class TestCap:
    def test_default_cap(self):
        assert ProximitySearchEngine().result_cap == DEFAULT_RESULT_CAP == 200

    def test_cap_truncates_in_rank_order(self):
        places = [make_place(f"Clone {i}", SAN_DIEGO) for i in range(10)]
        results = find_places_near_distance(
            LOS_ANGELES, places, 180.0, 10.0, DistanceUnit.KM, cap=3
        )
        assert [r.place.name for r in results] == ["Clone 0", "Clone 1", "Clone 2"]

    def test_per_call_cap_overrides_engine_cap(self):
        places = [make_place(f"Clone {i}", SAN_DIEGO) for i in range(10)]
        engine = ProximitySearchEngine(result_cap=5)
        assert len(engine.search(km_query(180.0, 10.0), places)) == 5
        assert len(engine.search(km_query(180.0, 10.0), places, cap=2)) == 2

    def test_large_dataset_respects_cap(self):
        places = [
            make_place(f"P{i}", Coordinate(32.0 + (i % 100) * 0.01, -117.0))
            for i in range(1_000)
        ]
        results = ProximitySearchEngine().search(km_query(250.0, 200.0), places)
        assert len(results) == 200

    def test_negative_cap_rejected(self):
        with pytest.raises(InvalidQueryParameter):
            ProximitySearchEngine().search(km_query(1.0, 1.0), [], cap=-1)

    def test_negative_engine_cap_rejected(self):
        with pytest.raises(InvalidQueryParameter):
            ProximitySearchEngine(result_cap=-1)

    def test_negative_cap_through_entry_point(self):
        with pytest.raises(InvalidQueryParameter):
            find_places_near_distance(LOS_ANGELES, [], 10.0, 5.0, cap=-1)


class TestInvalidInput:
    def test_nan_origin(self, california_places):
        origin = SimpleNamespace(latitude=math.nan, longitude=0.0)
        with pytest.raises(InvalidCoordinate):
            find_places_near_distance(origin, california_places, 10.0, 5.0)

    def test_out_of_range_origin(self, california_places):
        origin = SimpleNamespace(latitude=12.0, longitude=200.0)
        with pytest.raises(InvalidCoordinate):
            find_places_near_distance(origin, california_places, 10.0, 5.0)

    def test_nan_tolerance(self, california_places):
        with pytest.raises(InvalidQueryParameter):
            find_places_near_distance(LOS_ANGELES, california_places, 10.0, math.nan)

    def test_negative_target(self, california_places):
        with pytest.raises(InvalidQueryParameter):
            find_places_near_distance(LOS_ANGELES, california_places, -1.0, 5.0)

    def test_engine_does_not_clamp_tolerance(self, california_places):
        """A 5000 km band is honoured as given; clamping is the caller's job."""
        results = ProximitySearchEngine().search(
            km_query(0.0, 5_000.0), california_places
        )
        assert len(results) == len(california_places)
