"""
Unlock condition evaluation.

An entry's conditions are conjunctive: every condition the entry sets must
hold at the same time. Unset conditions are vacuously satisfied, and a
missing reading in the context fails the condition that needs it. Both
functions here are pure.
"""

from spark.models import ConditionStatus, SparkEntry, UnlockContext, UnlockDecision, Weather
from spark.services.geofence import is_within


def condition_status(entry: SparkEntry, context: UnlockContext) -> ConditionStatus:
    geofence_ok = None
    if entry.geofence is not None:
        geofence_ok = context.coordinate is not None and is_within(entry.geofence, context.coordinate)

    weather_ok = None
    if entry.weather is not None:
        weather_ok = (
            context.weather is not None
            and context.weather != Weather.UNKNOWN
            and context.weather == entry.weather
        )

    emotion_ok = None
    if entry.emotion is not None:
        emotion_ok = context.emotion is not None and context.emotion == entry.emotion

    return ConditionStatus(
        geofence=geofence_ok,
        weather=weather_ok,
        emotion=emotion_ok,
        earliest_unlock=context.now >= entry.earliest_unlock,
    )


def evaluate(entry: SparkEntry, context: UnlockContext) -> UnlockDecision:
    """
    Decide whether an entry should transition from locked to unlocked.

    :param entry: Entry to evaluate
    :type entry: SparkEntry
    :param context: Current readings; any of them may be missing
    :type context: UnlockContext
    :return: ALREADY_UNLOCKED for unlocked entries, otherwise whether all set
        conditions hold right now
    :rtype: UnlockDecision
    """
    if entry.unlocked_at is not None:
        return UnlockDecision.ALREADY_UNLOCKED
    if condition_status(entry, context).satisfied:
        return UnlockDecision.SHOULD_UNLOCK_NOW
    return UnlockDecision.REMAINS_LOCKED
