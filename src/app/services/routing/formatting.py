"""Display helpers for route distances and durations."""

METERS_TO_MILES = 0.000621371


def format_distance(meters: float) -> str:
    """Format a distance in meters as miles with one decimal, e.g. ``"5.0 mi"``."""
    miles = meters * METERS_TO_MILES
    return f"{miles:.1f} mi"


def format_duration(seconds: float) -> str:
    """Format a duration as ``"45 min"`` below an hour and ``"1h 30m"`` from an hour on."""
    minutes = int(seconds / 60 + 0.5)
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"
