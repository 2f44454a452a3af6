"""Integration tests for vocabulary resolution."""

import pytest

from constellation_store.exceptions import ReferentialIntegrityError
from constellation_store.kernel.vocabulary import TermResolver


class TestResolve:
    @pytest.mark.asyncio
    async def test_resolve_term(self, db_session, terms):
        resolver = TermResolver(db_session)
        assert await resolver.resolve(10) == terms["Female"]

    @pytest.mark.asyncio
    async def test_resolve_optional_none(self, db_session):
        assert await TermResolver(db_session).resolve_optional(None) is None

    @pytest.mark.asyncio
    async def test_unknown_term(self, db_session):
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await TermResolver(db_session).resolve(777)
        assert exc_info.value.component_id == 777

    @pytest.mark.asyncio
    async def test_resolve_geo(self, db_session, boston):
        resolver = TermResolver(db_session)
        assert await resolver.resolve_geo(1) == boston
        assert await resolver.resolve_geo_optional(None) is None
        with pytest.raises(ReferentialIntegrityError):
            await resolver.resolve_geo(2)


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_and_type_scoped(self, db_session):
        results = await TermResolver(db_session).search("entity_type", "PERS")
        assert [term.value for term in results] == ["person"]

    @pytest.mark.asyncio
    async def test_prefix_matches_first(self, db_session):
        results = await TermResolver(db_session).search("occupation", "l")
        # "Lawyers" and "Librarians" both start with l
        assert [term.value for term in results] == ["Lawyers", "Librarians"]

    @pytest.mark.asyncio
    async def test_substring_match_after_prefix(self, db_session):
        results = await TermResolver(db_session).search("entity_type", "o")
        assert [term.value for term in results] == ["corporateBody", "person"]

    @pytest.mark.asyncio
    async def test_limit(self, db_session):
        results = await TermResolver(db_session).search("entity_type", "", limit=2)
        assert len(results) == 2
