"""Delivery route construction: stop collection, resolution and optimization."""

from .builder import RouteBuilder
from .collector import StopCollector
from .formatting import format_distance, format_duration
from .resolver import LocationResolver

__all__ = ["LocationResolver", "StopCollector", "RouteBuilder", "format_distance", "format_duration"]
