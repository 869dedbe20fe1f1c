"""Weather readings: WMO code mapping and the fetcher contract."""

from collections.abc import Awaitable, Callable
from typing import Optional

from spark.models import Coordinate, Weather

# Called with the current coordinate (None if unknown); may raise.
WeatherFetcher = Callable[[Optional[Coordinate]], Awaitable[Weather]]

# WMO weather interpretation codes (WW), as reported by most forecast APIs.
_WMO_CODES: dict[int, Weather] = {
    0: Weather.CLEAR,
    1: Weather.PARTLY_CLOUDY,
    2: Weather.PARTLY_CLOUDY,
    3: Weather.CLOUDY,
    45: Weather.FOGGY,
    48: Weather.FOGGY,
    51: Weather.DRIZZLE,
    53: Weather.DRIZZLE,
    55: Weather.DRIZZLE,
    56: Weather.FREEZING_RAIN,
    57: Weather.FREEZING_RAIN,
    61: Weather.RAIN,
    63: Weather.RAIN,
    65: Weather.RAIN,
    66: Weather.FREEZING_RAIN,
    67: Weather.FREEZING_RAIN,
    71: Weather.SNOW,
    73: Weather.SNOW,
    75: Weather.SNOW,
    77: Weather.SNOW_GRAINS,
    80: Weather.RAIN,
    81: Weather.RAIN,
    82: Weather.RAIN,
    85: Weather.SNOW,
    86: Weather.SNOW,
    95: Weather.THUNDERSTORM,
    96: Weather.THUNDERSTORM,
    99: Weather.THUNDERSTORM,
}


def weather_from_wmo_code(code: int) -> Weather:
    """Map a WMO weather code to Weather; unmapped codes give UNKNOWN."""
    return _WMO_CODES.get(code, Weather.UNKNOWN)
