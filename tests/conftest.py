"""
Pytest fixtures for constellation store tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from constellation_store.config import Settings
from constellation_store.kernel.models import Base, GeoPlace, VocabularyTerm
from constellation_store.schemas import Editor, GeoTerm, Term


# Vocabulary seeded into every test database: (id, type, value)
VOCABULARY = [
    (1, "entity_type", "person"),
    (2, "entity_type", "corporateBody"),
    (3, "entity_type", "family"),
    (10, "gender", "Female"),
    (11, "gender", "Male"),
    (20, "language_code", "English"),
    (21, "script_code", "Latin"),
    (22, "language_code", "French"),
    (30, "nationality", "American"),
    (40, "occupation", "Librarians"),
    (41, "occupation", "Lawyers"),
    (50, "name_type", "alternativeForm"),
    (60, "date_type", "Birth"),
    (61, "date_type", "Death"),
    (70, "place_type", "AssociatedPlace"),
    (71, "place_role", "Birth"),
    (80, "source_type", "simple"),
    (90, "descriptive_rule", "RDA"),
    (100, "relation_type", "associatedWith"),
    (110, "document_type", "ArchivalResource"),
]


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """File-backed SQLite engine so every connection sees the same database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def seeded(session_maker) -> None:
    """Seed the controlled vocabulary and one geographic place."""
    async with session_maker() as session:
        for term_id, term_type, value in VOCABULARY:
            session.add(VocabularyTerm(id=term_id, type=term_type, value=value))
        session.add(
            GeoPlace(
                id=1,
                uri="http://www.geonames.org/4930956",
                name="Boston",
                latitude=42.358,
                longitude=-71.060,
                admin_code="MA",
                country_code="US",
            )
        )
        await session.commit()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker, seeded) -> AsyncGenerator[AsyncSession, None]:
    """Session on a seeded database, rolled back after the test."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        system_user_id=99,
        system_role_id=7,
        vocabulary_search_limit=5,
    )


@pytest.fixture
def editor() -> Editor:
    return Editor(user_id=1, role_id=2)


@pytest.fixture
def terms() -> dict:
    """Seeded vocabulary as Term values, keyed by value."""
    return {value: Term(id=term_id, type=term_type, value=value) for term_id, term_type, value in VOCABULARY}


@pytest.fixture
def boston() -> GeoTerm:
    return GeoTerm(
        id=1,
        uri="http://www.geonames.org/4930956",
        name="Boston",
        latitude=42.358,
        longitude=-71.060,
        admin_code="MA",
        country_code="US",
    )
