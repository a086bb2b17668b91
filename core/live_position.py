"""
live_position.py — Live Device Positioning
-------------------------------------------

Acquires a coordinate from the reporter's device, gated by its permission
state:

- granted: request a high-accuracy fix (10 s timeout, 30 s reuse window)
- prompt: ask for permission; the prompt performs the fix in the same gesture (15 s)
- denied / unsupported: no fix

A dismissed prompt counts as a denial. Fix failures after permission is
granted leave the permission granted and return no coordinate.
"""

import logging
import math
import time
from typing import Optional, Protocol

from config.settings import LIVE_FIX_TIMEOUT_S, LIVE_PROMPT_TIMEOUT_S, LIVE_MAX_AGE_S
from core.exception import (
    PositionError,
    PositionPermissionDenied,
    PositionUnavailable,
)
from core.models import LiveFix, PermissionState
from tools.geo_utils import normalize_coordinate

logger = logging.getLogger(__name__)


class PositioningDevice(Protocol):
    def query_permission(self) -> PermissionState: ...

    def get_current_position(self, *, high_accuracy: bool, timeout_s: float,
                             maximum_age_s: float) -> tuple[float, float]: ...

    def request_permission(self, *, high_accuracy: bool, timeout_s: float,
                           maximum_age_s: float) -> tuple[float, float]: ...


class ReportedFixDevice:
    """
    Device adapter for a fix the browser reported alongside the form.

    `reported_at` is a UNIX timestamp; fixes older than the requested
    maximum age, or stamped with a non-finite time, are rejected as
    unavailable.
    """

    def __init__(self, latitude=None, longitude=None, reported_at: Optional[float] = None,
                 permission: PermissionState = PermissionState.GRANTED, clock=time.time):
        self.latitude = latitude
        self.longitude = longitude
        self.reported_at = reported_at
        self.permission = PermissionState(permission)
        self.clock = clock

    def query_permission(self) -> PermissionState:
        return self.permission

    def _fix(self, maximum_age_s: float) -> tuple[float, float]:
        if self.latitude is None or self.longitude is None:
            raise PositionUnavailable("No position reported by the device")
        if self.reported_at is not None and not math.isfinite(self.reported_at):
            raise PositionUnavailable("Reported position has no usable timestamp")
        if self.reported_at is not None and self.clock() - self.reported_at > maximum_age_s:
            raise PositionUnavailable("Reported position is too old to reuse")
        return self.latitude, self.longitude

    def get_current_position(self, *, high_accuracy=True, timeout_s=LIVE_FIX_TIMEOUT_S,
                             maximum_age_s=LIVE_MAX_AGE_S):
        return self._fix(maximum_age_s)

    def request_permission(self, *, high_accuracy=True, timeout_s=LIVE_PROMPT_TIMEOUT_S,
                           maximum_age_s=LIVE_MAX_AGE_S):
        if self.permission in (PermissionState.DENIED, PermissionState.UNSUPPORTED):
            raise PositionPermissionDenied("Location permission denied")
        return self._fix(maximum_age_s)


class LivePositionSource:
    def __init__(self, device: Optional[PositioningDevice],
                 fix_timeout_s: float = LIVE_FIX_TIMEOUT_S,
                 prompt_timeout_s: float = LIVE_PROMPT_TIMEOUT_S,
                 maximum_age_s: float = LIVE_MAX_AGE_S):
        self.device = device
        self.fix_timeout_s = fix_timeout_s
        self.prompt_timeout_s = prompt_timeout_s
        self.maximum_age_s = maximum_age_s

    def _permission(self) -> PermissionState:
        if self.device is None:
            return PermissionState.UNSUPPORTED
        try:
            return PermissionState(self.device.query_permission())
        except Exception as e:
            logger.info("Positioning permission query failed: %s", e)
            return PermissionState.UNSUPPORTED

    def _granted_fix(self) -> LiveFix:
        try:
            raw = self.device.get_current_position(
                high_accuracy=True, timeout_s=self.fix_timeout_s, maximum_age_s=self.maximum_age_s
            )
        except PositionPermissionDenied:
            # Revoked between the query and the request
            return LiveFix(permission=PermissionState.DENIED)
        except PositionError as e:
            logger.info("Live fix failed: %s", e)
            return LiveFix(permission=PermissionState.GRANTED)
        return LiveFix(coordinate=normalize_coordinate(*raw), permission=PermissionState.GRANTED)

    def _prompted_fix(self) -> LiveFix:
        try:
            raw = self.device.request_permission(
                high_accuracy=True, timeout_s=self.prompt_timeout_s, maximum_age_s=self.maximum_age_s
            )
        except PositionPermissionDenied as e:
            logger.info("Location permission not given: %s", e)
            return LiveFix(permission=PermissionState.DENIED)
        except PositionError as e:
            logger.info("Live fix failed after permission prompt: %s", e)
            return LiveFix(permission=PermissionState.GRANTED)
        return LiveFix(coordinate=normalize_coordinate(*raw), permission=PermissionState.GRANTED)

    def acquire(self) -> LiveFix:
        """Never raises; a missing fix is reported as LiveFix(coordinate=None)."""
        state = self._permission()
        try:
            if state == PermissionState.GRANTED:
                return self._granted_fix()
            if state == PermissionState.PROMPT:
                return self._prompted_fix()
        except Exception as e:
            # Misbehaving device adapter, or a fix that is not a (lat, lng) pair
            logger.warning("Live positioning failed: %s", e)
            return LiveFix(permission=state)
        return LiveFix(permission=PermissionState.DENIED)
