"""
Vocabulary term resolver.

Terms and geographic terms are read-only: components store their ids and
the resolver turns ids back into immutable Term / GeoTerm values.
"""

from typing import List, Optional

from sqlalchemy import case, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from constellation_store.exceptions import ReferentialIntegrityError, StorageFailure
from constellation_store.kernel.models.vocabulary import GeoPlace, VocabularyTerm
from constellation_store.logging_config import get_logger
from constellation_store.schemas.term import GeoTerm, Term

logger = get_logger(__name__)


class TermResolver:
    """
    Resolves vocabulary ids for the read path.

    Usage:
        resolver = TermResolver(session)
        gender = await resolver.resolve(row.term_id)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, term_id: int) -> Term:
        """
        Resolve a vocabulary id.

        Raises:
            ReferentialIntegrityError: no term has this id
        """
        row = await self._get(VocabularyTerm, term_id)
        if row is None:
            raise ReferentialIntegrityError("unknown vocabulary term", kind="vocabulary", component_id=term_id)
        return Term.model_validate(row)

    async def resolve_optional(self, term_id: Optional[int]) -> Optional[Term]:
        if term_id is None:
            return None
        return await self.resolve(term_id)

    async def resolve_geo(self, geo_id: int) -> GeoTerm:
        """
        Resolve a geographic authority id.

        Raises:
            ReferentialIntegrityError: no geo term has this id
        """
        row = await self._get(GeoPlace, geo_id)
        if row is None:
            raise ReferentialIntegrityError("unknown geo term", kind="geo_place", component_id=geo_id)
        return GeoTerm.model_validate(row)

    async def resolve_geo_optional(self, geo_id: Optional[int]) -> Optional[GeoTerm]:
        if geo_id is None:
            return None
        return await self.resolve_geo(geo_id)

    async def search(self, term_type: str, query: str, limit: int = 50) -> List[Term]:
        """
        Case-insensitive substring search on term values of one type.

        Prefix matches sort before other matches, then by value.

        Args:
            term_type: Vocabulary type, e.g. "gender" or "entity_type"
            query: Text to look for in the value
            limit: Maximum number of terms returned

        Returns:
            Matching terms
        """
        prefix_rank = case((VocabularyTerm.value.istartswith(query, autoescape=True), 0), else_=1)
        stmt = (
            select(VocabularyTerm)
            .where(
                VocabularyTerm.type == term_type,
                VocabularyTerm.value.icontains(query, autoescape=True),
            )
            .order_by(prefix_rank, VocabularyTerm.value, VocabularyTerm.id)
            .limit(limit)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Vocabulary search failed: %s", exc)
            raise StorageFailure(str(exc), kind="vocabulary") from exc
        return [Term.model_validate(row) for row in result.scalars().all()]

    async def _get(self, model, ident: int):
        try:
            return await self.session.get(model, ident)
        except SQLAlchemyError as exc:
            logger.error("Vocabulary lookup failed: %s", exc)
            raise StorageFailure(str(exc), kind=model.__tablename__, component_id=ident) from exc
