"""
GPS route helpers for hikes and runs.

Imported hikes and runs carry their route as a Google encoded polyline in
``data.map.summary_polyline``. These helpers decode routes for the map
views and collect the start point of every route for the overview map.

Functions:
    decode_route: Decode an encoded polyline into (lat, lon) points
    route_for_log: Decoded route of a single log
    start_coordinates: First point of every decodable route
    route_bounds: Bounding box of a set of points
"""

from typing import Iterable, List, Optional, Tuple

import polyline

from ..models.log import LogRow

LatLon = Tuple[float, float]


def decode_route(encoded: Optional[str]) -> List[LatLon]:
    """
    Decode a Google encoded polyline.

    Missing, too-short or corrupt values yield an empty route rather than
    an error, so one bad import never hides the other routes.

    Example:
        >>> decode_route("_p~iF~ps|U_ulLnnqC_mqNvxq`@")
        [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]
    """
    if not encoded or not isinstance(encoded, str) or len(encoded) < 2:
        return []
    try:
        return [(float(lat), float(lon)) for lat, lon in polyline.decode(encoded)]
    except (ValueError, IndexError, TypeError):
        return []


def route_for_log(log: LogRow) -> List[LatLon]:
    route_map = log.data.get("map") or {}
    if not isinstance(route_map, dict):
        return []
    return decode_route(route_map.get("summary_polyline"))


def start_coordinates(logs: Iterable[LogRow]) -> List[LatLon]:
    """Return the first point of every log that has a decodable route."""
    starts = []
    for log in logs:
        route = route_for_log(log)
        if route:
            starts.append(route[0])
    return starts


def route_bounds(points: List[LatLon]) -> Optional[Tuple[LatLon, LatLon]]:
    """
    Return ``((min_lat, min_lon), (max_lat, max_lon))`` for the points, or
    None when there are none.
    """
    if not points:
        return None
    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    return (min(lats), min(lons)), (max(lats), max(lons))
