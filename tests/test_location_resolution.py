"""
End-to-end tests for the sighting location pipeline.
"""

import pytest

from conftest import gps_ifd, make_jpeg, record
from core.exception import SubdivisionRequired
from core.live_position import LivePositionSource, ReportedFixDevice
from core.location_resolution import (
    LocationResolver,
    check_location_step,
    default_pending_location,
    require_subdivision,
)
from core.models import Coordinate, EvidenceSource, PermissionState, ResolutionResult

SENTINEL = Coordinate(latitude=8.371965, longitude=124.856041)


class RecordingRemote:
    def __init__(self, answer=None, error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    def resolve(self, coordinate):
        self.calls.append(coordinate)
        if self.error:
            raise self.error
        return self.answer


class TestLocationResolver:

    def setup_method(self):
        self.remote = RecordingRemote()

    def make_resolver(self, catalog, remote=None):
        return LocationResolver(catalog=catalog, sentinel=SENTINEL, remote=remote or self.remote)

    def test_no_evidence_uses_sentinel_and_manual_barangay(self, catalog):
        result = self.make_resolver(catalog).resolve(manual_subdivision="Alae")
        assert result.coordinate == SENTINEL
        assert result.subdivision_name == "Alae"
        assert result.parent_region == "Manolo Fortich"
        assert result.has_direct_evidence is False
        assert result.evidence_source == EvidenceSource.PENDING
        assert self.remote.calls == []

    def test_photo_at_catalog_center(self, catalog):
        photo = make_jpeg(gps_ifd(8.3681, 124.865))
        result = self.make_resolver(catalog).resolve(photo=photo)
        assert result.coordinate == Coordinate(latitude=8.3681, longitude=124.865)
        assert result.subdivision_name == "Tankulan (Pob.)"
        assert result.parent_region == "Manolo Fortich"
        assert result.has_direct_evidence is True
        assert result.evidence_source == EvidenceSource.PHOTO_METADATA
        assert self.remote.calls == []

    def test_photo_without_gps_and_no_manual_barangay(self, catalog):
        result = self.make_resolver(catalog).resolve(photo=make_jpeg())
        assert result.coordinate == SENTINEL
        assert result.subdivision_name == ""
        assert result.has_direct_evidence is False

    def test_remote_fallback_when_catalog_too_far(self, catalog):
        remote = RecordingRemote(answer=catalog[0])
        far = {"latitude": 8.9, "longitude": 124.9}
        result = self.make_resolver(catalog, remote).resolve(photo=far)
        assert result.subdivision_name == catalog[0].name
        assert result.has_direct_evidence is True
        assert remote.calls == [Coordinate(latitude=8.9, longitude=124.9)]

    def test_out_of_catalog_location_is_valid_output(self, catalog):
        far = {"latitude": 8.9, "longitude": 124.9}
        result = self.make_resolver(catalog).resolve(photo=far)
        assert result.coordinate == Coordinate(latitude=8.9, longitude=124.9)
        assert result.subdivision_name == ""
        assert result.parent_region == ""
        assert result.has_direct_evidence is True

    def test_remote_error_degrades(self, catalog):
        remote = RecordingRemote(error=RuntimeError("boom"))
        result = self.make_resolver(catalog, remote).resolve(photo={"latitude": 8.9, "longitude": 124.9})
        assert result.subdivision_name == ""

    def test_manual_barangay_overrides_without_distance_check(self, catalog):
        photo = {"latitude": 8.3681, "longitude": 124.865}  # Tankulan center
        result = self.make_resolver(catalog).resolve(photo=photo, manual_subdivision="Minsuro")
        assert result.coordinate == Coordinate(latitude=8.3681, longitude=124.865)
        assert result.subdivision_name == "Minsuro"
        assert result.has_direct_evidence is True

    def test_manual_municipality_wins(self, catalog):
        result = self.make_resolver(catalog).resolve(manual_subdivision="Poblacion", manual_municipality="Libona")
        assert result.parent_region == "Libona"

    def test_unknown_manual_barangay_has_no_parent(self, catalog):
        result = self.make_resolver(catalog).resolve(manual_subdivision="Somewhere Else")
        assert result.subdivision_name == "Somewhere Else"
        assert result.parent_region == ""

    def test_live_position_used_when_no_photo(self, catalog):
        live = LivePositionSource(ReportedFixDevice(8.4236, 124.817))
        result = self.make_resolver(catalog).resolve(live_source=live)
        assert result.subdivision_name == "Alae"
        assert result.evidence_source == EvidenceSource.LIVE_POSITION
        assert result.has_direct_evidence is True

    def test_live_capture_photo_without_gps_uses_fix(self, catalog):
        live = LivePositionSource(ReportedFixDevice(8.4236, 124.817))
        result = self.make_resolver(catalog).resolve(photo=make_jpeg(), live_source=live)
        assert result.evidence_source == EvidenceSource.LIVE_POSITION

    def test_photo_gps_preferred_over_live(self, catalog):
        live = LivePositionSource(ReportedFixDevice(8.4236, 124.817))
        photo = {"latitude": 8.3681, "longitude": 124.865}
        result = self.make_resolver(catalog).resolve(photo=photo, live_source=live)
        assert result.evidence_source == EvidenceSource.PHOTO_METADATA
        assert result.subdivision_name == "Tankulan (Pob.)"

    def test_live_permission_denied_falls_back_to_sentinel(self, catalog):
        live = LivePositionSource(ReportedFixDevice(permission=PermissionState.DENIED))
        result = self.make_resolver(catalog).resolve(live_source=live, manual_subdivision="Ticala")
        assert result.coordinate == SENTINEL
        assert result.subdivision_name == "Ticala"

    def test_broken_live_source_never_raises(self, catalog):
        class Broken:
            def acquire(self):
                raise RuntimeError("device gone")

        result = self.make_resolver(catalog).resolve(live_source=Broken(), manual_subdivision="Alae")
        assert result.coordinate == SENTINEL

    def test_fallback_bound_is_configurable(self):
        catalog = [record("Lone", 8.0, 125.0, 0.015)]
        resolver = LocationResolver(catalog=catalog, sentinel=SENTINEL, remote=self.remote, fallback_km=1.0)
        result = resolver.resolve(photo={"latitude": 8.027, "longitude": 125.0})
        assert result.subdivision_name == ""
        assert len(self.remote.calls) == 1

    def test_default_sentinel_comes_from_settings(self, catalog):
        resolver = LocationResolver(catalog=catalog, remote=self.remote)
        assert resolver.sentinel == default_pending_location() == SENTINEL


class TestGates:

    def test_location_step_requires_photo_or_barangay(self):
        with pytest.raises(SubdivisionRequired):
            check_location_step(False, False, "  ")
        check_location_step(True, False, "")
        check_location_step(False, True, "")
        check_location_step(False, False, "Alae")

    def test_require_subdivision(self):
        with pytest.raises(SubdivisionRequired):
            require_subdivision(ResolutionResult(coordinate=SENTINEL))
        result = ResolutionResult(coordinate=SENTINEL, subdivision_name="Alae")
        assert require_subdivision(result) is result
