from unittest.mock import patch

import pytest

from qaforum.errors import BookmarkNotFoundError, InvalidInputError, PersistenceError
from qaforum.models.bookmark import Bookmark
from qaforum.services.bookmark import BookmarkService
from qaforum.services.collection import CollectionService
from tests.fakes import InMemoryBookmarkStore, InMemoryCollectionStore


@pytest.mark.unit
class TestBookmarkService:
    @pytest.mark.asyncio
    async def test_create_bookmark_success(
        self, bookmark_service: BookmarkService, test_username: str
    ):
        # Act
        result = await bookmark_service.create_bookmark(test_username, "q1")

        # Assert
        assert isinstance(result, Bookmark)
        assert result.username == test_username
        assert result.question_id == "q1"

    @pytest.mark.asyncio
    async def test_create_bookmark_adds_to_default_collection(
        self, bookmark_service: BookmarkService, collection_service: CollectionService
    ):
        # Act
        await bookmark_service.create_bookmark("alice", "q1")
        default = await collection_service.get_default_collection("alice")

        # Assert
        assert default.is_default is True
        assert default.name == "All Bookmarks"
        assert "q1" in default.bookmarks

    @pytest.mark.asyncio
    async def test_create_bookmark_creates_default_collection_once(
        self,
        bookmark_service: BookmarkService,
        collection_store: InMemoryCollectionStore,
    ):
        # Act
        await bookmark_service.create_bookmark("alice", "q1")
        await bookmark_service.create_bookmark("alice", "q2")

        # Assert
        defaults = [c for c in collection_store.list_for_owner("alice") if c.is_default]
        assert len(defaults) == 1
        assert defaults[0].bookmarks == ["q1", "q2"]

    @pytest.mark.asyncio
    async def test_create_bookmark_failure(
        self, bookmark_service: BookmarkService, bookmark_store: InMemoryBookmarkStore
    ):
        # Arrange
        with patch.object(bookmark_store, "create") as mock_create:
            mock_create.side_effect = RuntimeError("connection reset")

            # Act & Assert
            with pytest.raises(PersistenceError, match="Failed to create bookmark"):
                await bookmark_service.create_bookmark("alice", "q1")

    @pytest.mark.asyncio
    async def test_create_bookmark_survives_default_collection_failure(
        self,
        bookmark_service: BookmarkService,
        bookmark_store: InMemoryBookmarkStore,
        collection_store: InMemoryCollectionStore,
        caplog: pytest.LogCaptureFixture,
    ):
        # Arrange
        with patch.object(collection_store, "add_reference") as mock_add:
            mock_add.side_effect = RuntimeError("write timed out")

            # Act
            result = await bookmark_service.create_bookmark("alice", "q1")

        # Assert
        assert result.question_id == "q1"
        assert bookmark_store.find("alice", "q1") is not None
        assert "Could not add q1 to the default collection of alice" in caplog.text

    @pytest.mark.asyncio
    async def test_create_bookmark_requires_question_id(
        self, bookmark_service: BookmarkService
    ):
        # Act & Assert
        with pytest.raises(InvalidInputError, match="question_id is required"):
            await bookmark_service.create_bookmark("alice", "  ")

    @pytest.mark.asyncio
    async def test_create_bookmark_requires_username(
        self, bookmark_service: BookmarkService
    ):
        # Act & Assert
        with pytest.raises(InvalidInputError, match="username is required"):
            await bookmark_service.create_bookmark("", "q1")

    @pytest.mark.asyncio
    async def test_get_bookmarks_only_returns_owners_bookmarks(
        self, bookmark_service: BookmarkService
    ):
        # Arrange
        await bookmark_service.create_bookmark("alice", "q1")
        await bookmark_service.create_bookmark("alice", "q2")
        await bookmark_service.create_bookmark("bob", "q3")

        # Act
        result = await bookmark_service.get_bookmarks("alice")

        # Assert
        assert sorted(b.question_id for b in result) == ["q1", "q2"]

    @pytest.mark.asyncio
    async def test_get_bookmarks_error(
        self, bookmark_service: BookmarkService, bookmark_store: InMemoryBookmarkStore
    ):
        # Arrange
        with patch.object(bookmark_store, "list_for_owner") as mock_list:
            mock_list.side_effect = RuntimeError("unavailable")

            # Act & Assert
            with pytest.raises(PersistenceError):
                await bookmark_service.get_bookmarks("alice")

    @pytest.mark.asyncio
    async def test_remove_bookmark_success(
        self, bookmark_service: BookmarkService, collection_service: CollectionService
    ):
        # Arrange
        created = await bookmark_service.create_bookmark("alice", "q1")

        # Act
        deleted = await bookmark_service.remove_bookmark("alice", "q1")

        # Assert
        assert deleted.bookmark_id == created.bookmark_id
        assert await bookmark_service.get_bookmarks("alice") == []
        default = await collection_service.get_default_collection("alice")
        assert "q1" not in default.bookmarks

    @pytest.mark.asyncio
    async def test_remove_nonexistent_bookmark(self, bookmark_service: BookmarkService):
        # Act & Assert
        with pytest.raises(BookmarkNotFoundError):
            await bookmark_service.remove_bookmark("alice", "q1")

    @pytest.mark.asyncio
    async def test_remove_bookmark_twice_reports_not_found(
        self, bookmark_service: BookmarkService
    ):
        # Arrange
        await bookmark_service.create_bookmark("alice", "q1")
        await bookmark_service.remove_bookmark("alice", "q1")

        # Act & Assert
        with pytest.raises(BookmarkNotFoundError):
            await bookmark_service.remove_bookmark("alice", "q1")

    @pytest.mark.asyncio
    async def test_remove_bookmark_is_owner_scoped(
        self, bookmark_service: BookmarkService
    ):
        # Arrange
        await bookmark_service.create_bookmark("alice", "q1")

        # Act & Assert
        with pytest.raises(BookmarkNotFoundError):
            await bookmark_service.remove_bookmark("bob", "q1")
        assert await bookmark_service.is_bookmarked("alice", "q1") is True

    @pytest.mark.asyncio
    async def test_remove_bookmark_clears_duplicates(
        self,
        bookmark_service: BookmarkService,
        collection_service: CollectionService,
    ):
        # Arrange
        await bookmark_service.create_bookmark("alice", "q1")
        await bookmark_service.create_bookmark("alice", "q1")

        # Act
        await bookmark_service.remove_bookmark("alice", "q1")

        # Assert
        assert await bookmark_service.is_bookmarked("alice", "q1") is False
        default = await collection_service.get_default_collection("alice")
        assert default.bookmarks == []

    @pytest.mark.asyncio
    async def test_remove_bookmark_survives_default_collection_failure(
        self,
        bookmark_service: BookmarkService,
        collection_store: InMemoryCollectionStore,
    ):
        # Arrange
        await bookmark_service.create_bookmark("alice", "q1")
        with patch.object(collection_store, "remove_reference") as mock_remove:
            mock_remove.side_effect = RuntimeError("write timed out")

            # Act
            deleted = await bookmark_service.remove_bookmark("alice", "q1")

        # Assert
        assert deleted.question_id == "q1"
        assert await bookmark_service.is_bookmarked("alice", "q1") is False

    @pytest.mark.asyncio
    async def test_is_bookmarked_true(self, bookmark_service: BookmarkService):
        # Arrange
        await bookmark_service.create_bookmark("alice", "q1")

        # Act
        result = await bookmark_service.is_bookmarked("alice", "q1")

        # Assert
        assert result is True

    @pytest.mark.asyncio
    async def test_is_bookmarked_false(self, bookmark_service: BookmarkService):
        # Act
        result = await bookmark_service.is_bookmarked("alice", "q1")

        # Assert
        assert result is False


@pytest.mark.unit
class TestBookmarkServiceDefaults:
    def test_builds_default_collection_manager_on_shared_store(self):
        # Arrange
        store = InMemoryBookmarkStore()

        # Act
        service = BookmarkService(store=store)

        # Assert
        assert service._default_collections._bookmarks is store
