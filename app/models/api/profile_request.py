# app/models/api/profile_request.py
from typing import Any

from pydantic import BaseModel, Field


class PublishProfileRequest(BaseModel):
    """Request for POST /athletes/me/publish"""

    published: bool = Field(..., description="True to publish, False to hide the profile")


class SearchStatsEventRequest(BaseModel):
    """
    Request for POST /athletes/search-stats.

    Both camelCase and snake_case keys are read and merged: ids from
    ``athleteIds``/``athlete_ids`` and ``athleteId``/``athlete_id`` are
    concatenated, and ``event_type`` is the fallback for ``eventType``. Ids
    are validated by the service so a bad id is skipped rather than failing
    the whole batch.
    """

    athlete_ids_camel: Any = Field(None, alias="athleteIds")
    athlete_ids: Any = None
    athlete_id_camel: Any = Field(None, alias="athleteId")
    athlete_id: Any = None
    event_type_camel: Any = Field(None, alias="eventType")
    event_type: Any = None

    def all_athlete_ids(self) -> list[Any]:
        ids: list[Any] = []
        for values in (self.athlete_ids_camel, self.athlete_ids):
            if isinstance(values, list):
                ids.extend(values)
        for value in (self.athlete_id_camel, self.athlete_id):
            if value:
                ids.append(value)
        return ids

    def event_type_candidates(self) -> tuple[Any, Any]:
        """``eventType`` first, ``event_type`` as fallback."""
        return self.event_type_camel, self.event_type
