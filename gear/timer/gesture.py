"""Drag-around-the-gear geometry.

A drag is sampled as a series of points.  Each sample is turned into an
angle around the gear centre, and the signed shortest-path difference
between successive samples becomes a duration delta at a fixed rate of
``SECONDS_PER_ROTATION`` per full turn.
"""

from __future__ import annotations

import math

SECONDS_PER_ROTATION = 1800  # one full turn = 30 minutes

Point = tuple[float, float]


def angle_for(location: Point, center: Point) -> float:
    """Angle of ``location`` around ``center`` in degrees (atan2 convention)."""
    dx = location[0] - center[0]
    dy = location[1] - center[1]
    return math.degrees(math.atan2(dy, dx))


def angle_difference(start: float, current: float) -> float:
    """Signed shortest-path difference ``current - start`` in (-180, 180]."""
    # math.fmod keeps the sign of the dividend, like a truncating remainder
    difference = math.fmod(current, 360) - math.fmod(start, 360)
    if difference > 180:
        difference -= 360
    elif difference <= -180:
        difference += 360
    return difference


def seconds_for_angle(degrees: float) -> float:
    return degrees * SECONDS_PER_ROTATION / 360


class RotationTracker:
    """Turns successive drag samples into angle deltas.

    The first sample of a drag is measured from the drag's start location;
    every later sample from the previous one.  Call :meth:`end` when the
    drag is released.
    """

    def __init__(self, center: Point) -> None:
        self._center = center
        self._last_angle: float | None = None

    @property
    def center(self) -> Point:
        return self._center

    @center.setter
    def center(self, value: Point) -> None:
        self._center = value

    @property
    def active(self) -> bool:
        return self._last_angle is not None

    def move(self, start_location: Point, location: Point) -> float:
        """Return the angle (degrees) swept since the previous sample."""
        if self._last_angle is None:
            self._last_angle = angle_for(start_location, self._center)
        current = angle_for(location, self._center)
        delta = angle_difference(self._last_angle, current)
        self._last_angle = current
        return delta

    def end(self) -> None:
        self._last_angle = None
