import logging

from pydantic import UUID4

from qaforum.errors import (
    CannotDeleteDefaultError,
    CannotRenameDefaultError,
    CollectionNotFoundError,
    InvariantViolationError,
    PersistenceError,
)
from qaforum.models.collection import (
    AddReferenceResult,
    Collection,
    ReferenceAdded,
    ReferenceAlreadyExists,
)
from qaforum.stores.bookmark import BookmarkStore
from qaforum.stores.collection import CollectionStore
from qaforum.utils.validation import require_text

logger = logging.getLogger(__name__)


class DefaultCollectionManager:
    """Keeps each user's default collection in step with their bookmarks.

    Bookmark writes and default-collection writes are separate store calls.
    The follow-up write is best-effort: ``add_question`` and
    ``remove_question`` log and swallow failures, and ``sync`` rebuilds the
    default collection from the live bookmarks when a caller wants to heal.
    """

    def __init__(
        self,
        collection_store: CollectionStore | None = None,
        bookmark_store: BookmarkStore | None = None,
    ) -> None:
        self._collections = collection_store or CollectionStore()
        self._bookmarks = bookmark_store or BookmarkStore()

    async def get_or_create(self, username: str) -> Collection:
        """Get the user's default collection, creating it on first use.

        Raises:
            InvalidInputError: If username is blank
            PersistenceError: If the store call fails
        """
        username = require_text(username, "username")
        try:
            return self._collections.get_or_create_default(username)
        except Exception as e:
            raise PersistenceError(
                f"Failed to get default collection: {str(e)}"
            ) from e

    async def add_question(self, username: str, question_id: str) -> Collection | None:
        """Add a newly bookmarked question to the default collection.

        Returns:
            The updated default collection, or None if the update failed
        """
        try:
            default = self._collections.get_or_create_default(username)
            return self._collections.add_reference(
                username, str(default.collection_id), question_id
            )
        except Exception:
            logger.exception(
                "Could not add %s to the default collection of %s",
                question_id,
                username,
            )
            return None

    async def remove_question(
        self, username: str, question_id: str
    ) -> Collection | None:
        """Pull an unbookmarked question out of the default collection.

        Returns:
            The updated default collection, or None if the update failed
        """
        try:
            default = self._collections.get_or_create_default(username)
            return self._collections.remove_reference(
                username, str(default.collection_id), question_id
            )
        except Exception:
            logger.exception(
                "Could not remove %s from the default collection of %s",
                question_id,
                username,
            )
            return None

    async def sync(self, username: str) -> Collection:
        """Rebuild the default collection from the user's live bookmarks.

        Missing questions are added and stale ones pulled, one set update at a
        time, so a concurrent bookmark write is never overwritten wholesale.

        Raises:
            InvalidInputError: If username is blank
            PersistenceError: If a store call fails
        """
        username = require_text(username, "username")
        try:
            default = self._collections.get_or_create_default(username)
            live = {
                bookmark.question_id
                for bookmark in self._bookmarks.list_for_owner(username)
            }
            current = set(default.bookmarks)
            collection_id = str(default.collection_id)
            for question_id in sorted(live - current):
                logger.warning(
                    "Default collection of %s was missing %s", username, question_id
                )
                default = self._collections.add_reference(
                    username, collection_id, question_id
                ) or default
            stale = current - live
            if stale:
                # Re-read so a question bookmarked again mid-sync is kept.
                stale -= {
                    bookmark.question_id
                    for bookmark in self._bookmarks.list_for_owner(username)
                }
            for question_id in sorted(stale):
                logger.warning(
                    "Default collection of %s held stale %s", username, question_id
                )
                default = self._collections.remove_reference(
                    username, collection_id, question_id
                ) or default
            return default
        except Exception as e:
            raise PersistenceError(
                f"Failed to sync default collection: {str(e)}"
            ) from e


class CollectionService:
    """Service for managing bookmark collections.

    This service handles creating, renaming and deleting collections, as well
    as adding and removing question references in non-default collections.
    The default collection is only changed through DefaultCollectionManager.
    """

    def __init__(
        self,
        store: CollectionStore | None = None,
        default_collections: DefaultCollectionManager | None = None,
    ) -> None:
        self._store = store or CollectionStore()
        self._default_collections = default_collections or DefaultCollectionManager(
            collection_store=self._store
        )

    async def create_collection(self, username: str, name: str) -> Collection:
        """Create a new, empty, non-default collection.

        Args:
            username: Owner of the collection
            name: Display name of the collection

        Returns:
            The created collection

        Raises:
            InvalidInputError: If username or name is blank
            PersistenceError: If the store call fails
        """
        username = require_text(username, "username")
        name = require_text(name, "name")
        try:
            collection = self._store.create(username, name)
        except Exception as e:
            raise PersistenceError(f"Failed to create collection: {str(e)}") from e
        logger.info("Created collection %s for %s", collection.collection_id, username)
        return collection

    async def get_collections(self, username: str) -> list[Collection]:
        """Get every collection owned by a user, default collection first.

        Raises:
            InvalidInputError: If username is blank
            PersistenceError: If the store call fails
        """
        username = require_text(username, "username")
        try:
            return self._store.list_for_owner(username)
        except Exception as e:
            raise PersistenceError(f"Failed to get collections: {str(e)}") from e

    async def get_default_collection(self, username: str) -> Collection:
        return await self._default_collections.get_or_create(username)

    async def sync_default_collection(self, username: str) -> Collection:
        return await self._default_collections.sync(username)

    async def get_collection(self, username: str, collection_id: UUID4) -> Collection:
        """Get one of the user's collections.

        Raises:
            CollectionNotFoundError: If the user owns no such collection
            PersistenceError: If the store call fails
        """
        username = require_text(username, "username")
        try:
            collection = self._store.get(username, str(collection_id))
        except Exception as e:
            raise PersistenceError(f"Failed to get collection: {str(e)}") from e
        if collection is None:
            raise CollectionNotFoundError("Collection not found")
        return collection

    async def rename_collection(
        self, username: str, collection_id: UUID4, name: str
    ) -> Collection:
        """Rename one of the user's non-default collections.

        Args:
            username: Owner of the collection
            collection_id: ID of the collection to rename
            name: The new display name

        Returns:
            The renamed collection

        Raises:
            InvalidInputError: If username or name is blank
            CollectionNotFoundError: If the user owns no such collection
            CannotRenameDefaultError: If the collection is the default one
            PersistenceError: If a store call fails
        """
        name = require_text(name, "name")
        collection = await self.get_collection(username, collection_id)
        if collection.is_default:
            raise CannotRenameDefaultError("Cannot rename default collection")
        try:
            renamed = self._store.rename(collection.username, str(collection_id), name)
        except Exception as e:
            raise PersistenceError(f"Failed to rename collection: {str(e)}") from e
        if renamed is None:
            raise CollectionNotFoundError("Collection not found")
        return renamed

    async def delete_collection(
        self, username: str, collection_id: UUID4
    ) -> Collection:
        """Delete one of the user's non-default collections.

        Returns:
            The deleted collection

        Raises:
            CollectionNotFoundError: If the user owns no such collection
            CannotDeleteDefaultError: If the collection is the default one
            PersistenceError: If a store call fails
        """
        collection = await self.get_collection(username, collection_id)
        if collection.is_default:
            raise CannotDeleteDefaultError("Cannot delete default collection")
        try:
            deleted = self._store.delete(collection.username, str(collection_id))
        except Exception as e:
            raise PersistenceError(f"Failed to delete collection: {str(e)}") from e
        if deleted is None:
            raise CollectionNotFoundError("Collection not found")
        logger.info("Deleted collection %s of %s", collection_id, collection.username)
        return deleted

    async def add_bookmark(
        self, username: str, collection_id: UUID4, question_id: str
    ) -> AddReferenceResult:
        """Add a question reference to one of the user's collections.

        Adding a question that is already present is not an error: the
        unchanged collection comes back wrapped in ReferenceAlreadyExists.

        Args:
            username: Owner of the collection
            collection_id: ID of the collection
            question_id: ID of the question to add

        Returns:
            ReferenceAdded with the updated collection, or
            ReferenceAlreadyExists with the unchanged one

        Raises:
            InvalidInputError: If username or question_id is blank
            CollectionNotFoundError: If the user owns no such collection
            InvariantViolationError: If the collection is the default one
            PersistenceError: If a store call fails
        """
        question_id = require_text(question_id, "question_id")
        collection = await self.get_collection(username, collection_id)
        if collection.is_default:
            raise InvariantViolationError(
                "The default collection follows your bookmarks; "
                "bookmark the question instead"
            )
        if question_id in collection.bookmarks:
            return ReferenceAlreadyExists(collection=collection)
        try:
            updated = self._store.add_reference(
                collection.username, str(collection_id), question_id
            )
        except Exception as e:
            raise PersistenceError(f"Failed to add bookmark: {str(e)}") from e
        if updated is None:
            raise CollectionNotFoundError("Collection not found")
        return ReferenceAdded(collection=updated)

    async def remove_bookmark(
        self, username: str, collection_id: UUID4, question_id: str
    ) -> Collection:
        """Remove a question reference from one of the user's collections.

        Succeeds without change if the question was not in the collection.

        Raises:
            InvalidInputError: If username or question_id is blank
            CollectionNotFoundError: If the user owns no such collection
            InvariantViolationError: If the collection is the default one
            PersistenceError: If a store call fails
        """
        question_id = require_text(question_id, "question_id")
        collection = await self.get_collection(username, collection_id)
        if collection.is_default:
            raise InvariantViolationError(
                "The default collection follows your bookmarks; "
                "unbookmark the question instead"
            )
        try:
            updated = self._store.remove_reference(
                collection.username, str(collection_id), question_id
            )
        except Exception as e:
            raise PersistenceError(f"Failed to remove bookmark: {str(e)}") from e
        if updated is None:
            raise CollectionNotFoundError("Collection not found")
        return updated

    async def get_collection_bookmarks(self, collection_id: UUID4) -> list[str]:
        """Get the question ids referenced by a collection.

        Raises:
            CollectionNotFoundError: If collection not found
            PersistenceError: If the store call fails
        """
        try:
            collection = self._store.get_by_id(str(collection_id))
        except Exception as e:
            raise PersistenceError(f"Failed to get bookmarks: {str(e)}") from e
        if collection is None:
            raise CollectionNotFoundError("Collection not found")
        return list(collection.bookmarks)
