"""RouteLinkPolicy — map preview and navigation links for an ordered stop list."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from fieldops.domain.value_objects.geo_point import GeoPoint

EMBED_DIRECTIONS_URL = "https://www.google.com/maps/embed/v1/directions"
EMBED_PLACE_URL = "https://www.google.com/maps/embed/v1/place"
NAVIGATION_URL = "https://www.google.com/maps/dir/"
SEARCH_URL = "https://www.google.com/maps/search/"
VIEW_URL = "https://www.google.com/maps"

WAYPOINT_SEPARATOR = "|"
TRAVEL_MODE = "driving"


@dataclass(frozen=True)
class RouteLinks:
    """Origin, ordered waypoints and destination plus the derived URLs."""

    origin: GeoPoint
    destination: GeoPoint
    waypoints: tuple[GeoPoint, ...]
    embed_url: str
    navigation_url: str
    stop_count: int

    @property
    def is_single_place(self) -> bool:
        return self.stop_count == 1


def location_link(point: GeoPoint) -> str:
    """Link that opens a single stop in the maps app."""
    return str(httpx.URL(VIEW_URL, params={"q": point.as_query()}))


def location_search_link(point: GeoPoint) -> str:
    return str(httpx.URL(SEARCH_URL, params={"api": "1", "query": point.as_query()}))


def build_route_links(stops: list[GeoPoint], api_key: str) -> RouteLinks:
    """Pure function: turn an ordered stop list into preview + navigation links.

    - one stop  → a place reference, no route
    - 2+ stops  → origin = first, destination = last, waypoints = the rest

    Stops are never reordered or optimized.

    Raises:
        ValueError: if ``stops`` is empty.
    """
    if not stops:
        raise ValueError("Cannot build a route from an empty stop list")

    if len(stops) == 1:
        place = stops[0]
        embed = httpx.URL(EMBED_PLACE_URL, params={"key": api_key, "q": place.as_query()})
        return RouteLinks(
            origin=place,
            destination=place,
            waypoints=(),
            embed_url=str(embed),
            navigation_url=location_search_link(place),
            stop_count=1,
        )

    origin, destination = stops[0], stops[-1]
    waypoints = tuple(stops[1:-1])

    embed_params = {
        "key": api_key,
        "travelmode": TRAVEL_MODE,
        "origin": origin.as_query(),
        "destination": destination.as_query(),
    }
    nav_params = {
        "api": "1",
        "origin": origin.as_query(),
        "destination": destination.as_query(),
        "travelmode": TRAVEL_MODE,
    }
    if waypoints:
        joined = WAYPOINT_SEPARATOR.join(p.as_query() for p in waypoints)
        embed_params["waypoints"] = joined
        nav_params["waypoints"] = joined

    return RouteLinks(
        origin=origin,
        destination=destination,
        waypoints=waypoints,
        embed_url=str(httpx.URL(EMBED_DIRECTIONS_URL, params=embed_params)),
        navigation_url=str(httpx.URL(NAVIGATION_URL, params=nav_params)),
        stop_count=len(stops),
    )
