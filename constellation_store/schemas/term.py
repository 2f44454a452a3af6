"""
Vocabulary schemas.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Term(BaseModel):
    """Immutable controlled-vocabulary entry, referenced by id."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    type: Optional[str] = None
    value: Optional[str] = None
    uri: Optional[str] = None
    description: Optional[str] = None


class GeoTerm(BaseModel):
    """Immutable geographic authority entry used by places."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    uri: Optional[str] = None
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    admin_code: Optional[str] = None
    country_code: Optional[str] = None
