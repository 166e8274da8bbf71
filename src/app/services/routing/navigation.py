"""Deep links that hand a computed route to the Google Maps app."""

from __future__ import annotations

from typing import Literal
from urllib.parse import quote

from ...models.domain import Route

Platform = Literal["ios", "android", "web"]


def build_navigation_url(route: Route, platform: Platform = "web", mode: str = "driving") -> str | None:
    """Build a turn-by-turn navigation link for ``route``.

    The first stop is the origin, the last the destination and everything in
    between is passed as waypoints in visiting order. Returns None for routes
    without stops.
    """
    if not route.stops:
        return None

    origin = route.stops[0].coordinates.as_param()
    destination = route.stops[-1].coordinates.as_param()
    waypoints = quote("|".join(stop.coordinates.as_param() for stop in route.stops[1:-1]), safe=",")

    if platform == "ios":
        url = f"comgooglemaps://?saddr={origin}&daddr={destination}"
        if waypoints:
            url += f"&waypoints={waypoints}"
        return url + f"&directionsmode={mode}"

    if platform == "android":
        url = f"google.navigation:q={destination}"
        if waypoints:
            url += f"&waypoints={waypoints}"
        return url

    url = f"https://www.google.com/maps/dir/?api=1&origin={origin}&destination={destination}"
    if waypoints:
        url += f"&waypoints={waypoints}"
    return url + f"&travelmode={mode}"
