import os
from typing import Generator

import pytest
from neo4j import Driver, GraphDatabase

from qaforum.services.bookmark import BookmarkService
from qaforum.services.collection import CollectionService, DefaultCollectionManager
from qaforum.services.notification import NotificationHub
from qaforum.services.theme_vote import ThemeVoteService
from tests.fakes import (
    InMemoryBookmarkStore,
    InMemoryCollectionStore,
    InMemoryThemeVoteStore,
)

# Test configuration
TEST_NEO4J_URI = os.getenv("TEST_NEO4J_URI")
TEST_NEO4J_USER = os.getenv("TEST_NEO4J_USER", "neo4j")
TEST_NEO4J_PASSWORD = os.getenv("TEST_NEO4J_PASSWORD", "password")
TEST_NEO4J_DATABASE = os.getenv("TEST_NEO4J_DATABASE", "neo4j")


# Store fixtures
@pytest.fixture
def bookmark_store() -> InMemoryBookmarkStore:
    return InMemoryBookmarkStore()


@pytest.fixture
def collection_store() -> InMemoryCollectionStore:
    return InMemoryCollectionStore()


@pytest.fixture
def theme_vote_store() -> InMemoryThemeVoteStore:
    return InMemoryThemeVoteStore()


# Service fixtures
@pytest.fixture
def default_collections(
    collection_store: InMemoryCollectionStore, bookmark_store: InMemoryBookmarkStore
) -> DefaultCollectionManager:
    return DefaultCollectionManager(
        collection_store=collection_store, bookmark_store=bookmark_store
    )


@pytest.fixture
def bookmark_service(
    bookmark_store: InMemoryBookmarkStore,
    default_collections: DefaultCollectionManager,
) -> BookmarkService:
    return BookmarkService(
        store=bookmark_store, default_collections=default_collections
    )


@pytest.fixture
def collection_service(
    collection_store: InMemoryCollectionStore,
    default_collections: DefaultCollectionManager,
) -> CollectionService:
    return CollectionService(
        store=collection_store, default_collections=default_collections
    )


@pytest.fixture
def theme_vote_service(theme_vote_store: InMemoryThemeVoteStore) -> ThemeVoteService:
    return ThemeVoteService(store=theme_vote_store)


@pytest.fixture
def notification_hub() -> NotificationHub:
    return NotificationHub()


# Test data fixtures
@pytest.fixture
def test_username() -> str:
    return "alice"


@pytest.fixture
def another_username() -> str:
    return "bob"


# Database fixtures
@pytest.fixture
def db_driver() -> Generator[Driver, None, None]:
    if not TEST_NEO4J_URI:
        pytest.skip("TEST_NEO4J_URI is not set")
    driver = GraphDatabase.driver(
        TEST_NEO4J_URI, auth=(TEST_NEO4J_USER, TEST_NEO4J_PASSWORD)
    )
    yield driver
    with driver.session(database=TEST_NEO4J_DATABASE) as session:
        session.run(
            """
            MATCH (n)
            WHERE n:Bookmark OR n:Collection OR n:ThemeVote
            DETACH DELETE n
            """
        ).consume()
    driver.close()
