"""Entry query model."""

from typing import Optional

from pydantic import BaseModel

from spark.models.enums import Emotion, LockFilter, SortOrder, Weather


class EntryQuery(BaseModel):
    """Filters and ordering for listing entries.

    ``emotion`` and ``weather`` match entries that require that emotion or
    weather to unlock.
    """
    search: Optional[str] = None
    lock_state: LockFilter = LockFilter.ALL
    emotion: Optional[Emotion] = None
    weather: Optional[Weather] = None
    sort: SortOrder = SortOrder.NEWEST
