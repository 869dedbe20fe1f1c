"""Demo entries for trying the app without authoring notes first."""

from datetime import datetime, timedelta
from typing import Optional

from spark.models import Emotion, Geofence, SparkEntry, Weather, utc_now


def _ago(now: datetime, *, days: int = 0, hours: int = 0) -> datetime:
    return now - timedelta(days=days, hours=hours)


def build_demo_entries(now: Optional[datetime] = None) -> list[SparkEntry]:
    """
    Build the ten demo notes, dated relative to ``now``.

    :param now: Reference instant; defaults to the current time
    :type now: datetime | None
    :return: A mix of locked and unlocked entries covering every condition kind
    :rtype: list[SparkEntry]
    """
    now = now or utc_now()

    return [
        SparkEntry(
            title="Memories from Central Park",
            content="I remember walking through Central Park...",
            geofence=Geofence(latitude=40.7851, longitude=-73.9683, radius=150),
            creation_date=_ago(now, days=5),
        ),
        SparkEntry(
            title="Grateful for Today",
            content="Today was amazing!",
            emotion=Emotion.GRATEFUL,
            creation_date=_ago(now, days=7),
            unlocked_at=_ago(now, hours=2),
        ),
        SparkEntry(
            title="Rainy Day Thoughts",
            content="There's something peaceful about rainy days...",
            weather=Weather.RAIN,
            creation_date=_ago(now, days=3),
        ),
        SparkEntry(
            title="Celebration Note",
            content="I want to capture this moment of pure joy!",
            emotion=Emotion.HAPPY,
            creation_date=_ago(now, days=10),
        ),
        SparkEntry(
            title="Beach Sunset Memory",
            content="The perfect beach sunset...",
            geofence=Geofence(latitude=34.0522, longitude=-118.2437, radius=200),
            weather=Weather.CLEAR,
            creation_date=_ago(now, days=14),
        ),
        SparkEntry(
            title="Morning Reflection",
            content="Early mornings have become my favorite time.",
            creation_date=_ago(now, days=20),
            unlocked_at=_ago(now, days=1),
        ),
        SparkEntry(
            title="Winter Wonderland",
            content="Snow days are magical.",
            weather=Weather.SNOW,
            creation_date=_ago(now, days=2),
        ),
        SparkEntry(
            title="Perfect Day Memory",
            content="Everything aligned perfectly that day...",
            geofence=Geofence(latitude=37.7749, longitude=-122.4194, radius=150),
            weather=Weather.PARTLY_CLOUDY,
            emotion=Emotion.CALM,
            creation_date=_ago(now, days=8),
        ),
        SparkEntry(
            title="Future Me",
            content="Hey future me!",
            creation_date=_ago(now, hours=12),
            earliest_unlock=now + timedelta(days=30),
        ),
        SparkEntry(
            title="Quick Note",
            content="Just a quick thought...",
            emotion=Emotion.EXCITED,
            creation_date=_ago(now, days=4),
            unlocked_at=_ago(now, hours=5),
        ),
    ]
