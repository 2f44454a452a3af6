"""
Controlled vocabulary tables. Read-only from the store's point of view.
"""

from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from constellation_store.kernel.models.base import Base


class VocabularyTerm(Base):
    """A controlled-vocabulary entry referenced by id from components."""

    __tablename__ = "vocabulary"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    uri: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<VocabularyTerm {self.id} {self.type}:{self.value}>"


class GeoPlace(Base):
    """A geographic authority entry referenced by places."""

    __tablename__ = "geo_place"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    uri: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    admin_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    country_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    def __repr__(self) -> str:
        return f"<GeoPlace {self.id} {self.name}>"
