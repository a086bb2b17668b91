"""
Unit Tests for catalog barangay matching.
"""

from conftest import record
from core.local_resolver import rank_by_distance, resolve_local
from core.models import Coordinate

KM_PER_DEGREE_LAT = 6371 * 3.141592653589793 / 180


def north_of(lat, lon, km):
    return Coordinate(latitude=round(lat + km / KM_PER_DEGREE_LAT, 6), longitude=lon)


class TestResolveLocal:

    def setup_method(self):
        self.small = record("Small", 8.0, 125.0, 0.015)
        self.wide = record("Wide", 8.01, 125.0, 5.0)

    def test_center_resolves_to_own_entry(self):
        # Also inside Wide's radius, but Small is closer
        center = Coordinate(latitude=8.0, longitude=125.0)
        assert resolve_local(center, [self.wide, self.small]) == self.small

    def test_containment_beats_closer_uncontained_center(self):
        near_but_tight = record("Tight", 8.0, 125.0, 0.1)
        far_but_wide = record("Broad", 8.02, 125.0, 3.0)
        point = north_of(8.0, 125.0, 1.0)
        assert resolve_local(point, [near_but_tight, far_but_wide]) == far_but_wide

    def test_nearest_fallback_within_five_km(self):
        lone = record("Lone", 8.0, 125.0, 0.015)
        other = record("Other", 8.2, 125.0, 0.015)
        point = north_of(8.0, 125.0, 3.0)
        assert resolve_local(point, [other, lone]) == lone

    def test_nothing_within_fallback(self):
        lone = record("Lone", 8.0, 125.0, 0.015)
        point = north_of(8.0, 125.0, 10.0)
        assert resolve_local(point, [lone]) is None

    def test_custom_fallback_bound(self):
        lone = record("Lone", 8.0, 125.0, 0.015)
        point = north_of(8.0, 125.0, 3.0)
        assert resolve_local(point, [lone], fallback_km=2.0) is None

    def test_tie_keeps_catalog_order(self):
        first = record("First", 8.0, 125.0, 1.0)
        second = record("Second", 8.0, 125.0, 1.0)
        point = north_of(8.0, 125.0, 0.5)
        assert resolve_local(point, [first, second]) == first
        assert resolve_local(point, [second, first]) == second

    def test_empty_catalog(self):
        assert resolve_local(Coordinate(latitude=8.0, longitude=125.0), []) is None

    def test_rank_by_distance_keeps_order(self):
        ranked = rank_by_distance(Coordinate(latitude=8.0, longitude=125.0), [self.wide, self.small])
        assert [r.name for r, _ in ranked] == ["Wide", "Small"]
        assert ranked[1][1] == 0.0


class TestBuiltinCatalogMatching:

    def test_every_center_resolves_to_itself(self, catalog):
        for entry in catalog:
            assert resolve_local(entry.center, catalog) == entry

    def test_far_away_point(self, catalog):
        manila = Coordinate(latitude=14.5995, longitude=120.9842)
        assert resolve_local(manila, catalog) is None
