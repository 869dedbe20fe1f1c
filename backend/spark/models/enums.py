"""
Enum definitions for the Spark API.

Weather and Emotion values are the tags written to the entries document, so
they must stay stable across releases.
"""
from enum import Enum


class Weather(str, Enum):
    """Observable weather states."""
    CLEAR = "clear"
    PARTLY_CLOUDY = "partlyCloudy"
    CLOUDY = "cloudy"
    FOGGY = "foggy"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    FREEZING_RAIN = "freezingRain"
    SNOW = "snow"
    SNOW_GRAINS = "snowGrains"
    THUNDERSTORM = "thunderstorm"
    # No reading available. Never a valid unlock requirement.
    UNKNOWN = "unknown"


class Emotion(str, Enum):
    """Self-reported moods."""
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    RELAXED = "relaxed"
    EXCITED = "excited"
    STRESSED = "stressed"
    BORED = "bored"
    ANXIOUS = "anxious"
    GRATEFUL = "grateful"
    CALM = "calm"
    ENERGETIC = "energetic"
    TIRED = "tired"


class UnlockDecision(str, Enum):
    """Outcome of evaluating an entry against a context."""
    ALREADY_UNLOCKED = "already_unlocked"
    SHOULD_UNLOCK_NOW = "should_unlock_now"
    REMAINS_LOCKED = "remains_locked"


class LockFilter(str, Enum):
    """Lock-state filter for entry queries."""
    ALL = "all"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class SortOrder(str, Enum):
    """Orderings available to entry queries."""
    NEWEST = "newest"
    OLDEST = "oldest"
    RECENTLY_UNLOCKED = "recently_unlocked"


class LocationPermission(str, Enum):
    """Location permission as reported by the location collaborator."""
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    AUTHORIZED = "authorized"


class ChangeKind(str, Enum):
    """Kinds of change published by the entry store."""
    LOADED = "loaded"
    ADDED = "added"
    UPDATED = "updated"
    UNLOCKED = "unlocked"
    CLEARED = "cleared"
    STORAGE_ERROR = "storage_error"
