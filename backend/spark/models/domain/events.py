"""Entry store change events."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from spark.models.domain.common import utc_now
from spark.models.enums import ChangeKind


class EntryChangeEvent(BaseModel):
    """Published after the entry store changes."""
    kind: ChangeKind
    entry_ids: list[str] = Field(default_factory=list)
    detail: Optional[str] = None
    occurred_at: datetime = Field(default_factory=utc_now)
