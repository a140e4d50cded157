from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from unidirectory.schemas.university import UniversityResponse


class FavoriteCreate(BaseModel):
    """Body of POST /favorites. Presence of universityId is checked by the endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    university_id: Optional[int] = Field(None, alias="universityId")


class FavoriteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    university_id: int
    created_at: Optional[datetime] = None


class FavoriteWithUniversity(FavoriteResponse):
    """Favorite joined with the University it points to"""
    university: UniversityResponse
