"""Great-circle geofence matching."""

import math

from spark.models import Coordinate, Geofence

# IUGG mean Earth radius.
EARTH_RADIUS_METERS = 6_371_008.8


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """
    Haversine surface distance between two coordinates.

    :param a: First coordinate
    :type a: Coordinate
    :param b: Second coordinate
    :type b: Coordinate
    :return: Distance in meters; symmetric in its arguments
    :rtype: float
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h just outside [0, 1] near antipodes.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


def is_within(geofence: Geofence, coordinate: Coordinate) -> bool:
    """Return True if the coordinate lies inside the geofence (boundary inclusive)."""
    return distance_meters(geofence.center, coordinate) <= geofence.radius
