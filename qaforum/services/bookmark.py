import logging

from qaforum.errors import BookmarkNotFoundError, PersistenceError
from qaforum.models.bookmark import Bookmark
from qaforum.services.collection import DefaultCollectionManager
from qaforum.stores.bookmark import BookmarkStore
from qaforum.utils.validation import require_text

logger = logging.getLogger(__name__)


class BookmarkService:
    """Service for managing bookmarks.

    This service handles creating and removing bookmarks and mirrors each
    change into the owner's default collection. The mirror write happens
    after the bookmark write and never fails the bookmark operation.
    """

    def __init__(
        self,
        store: BookmarkStore | None = None,
        default_collections: DefaultCollectionManager | None = None,
    ) -> None:
        self._store = store or BookmarkStore()
        self._default_collections = default_collections or DefaultCollectionManager(
            bookmark_store=self._store
        )

    async def create_bookmark(self, username: str, question_id: str) -> Bookmark:
        """Bookmark a question and add it to the default collection.

        Args:
            username: Owner of the bookmark
            question_id: ID of the question to bookmark

        Returns:
            The created bookmark

        Raises:
            InvalidInputError: If username or question_id is blank
            PersistenceError: If the bookmark cannot be stored
        """
        username = require_text(username, "username")
        question_id = require_text(question_id, "question_id")
        try:
            bookmark = self._store.create(username, question_id)
        except Exception as e:
            raise PersistenceError(f"Failed to create bookmark: {str(e)}") from e
        logger.info("%s bookmarked %s", username, question_id)
        await self._default_collections.add_question(username, question_id)
        return bookmark

    async def get_bookmarks(self, username: str) -> list[Bookmark]:
        """Get every bookmark owned by a user, in no particular order.

        Raises:
            InvalidInputError: If username is blank
            PersistenceError: If fetching fails
        """
        username = require_text(username, "username")
        try:
            return self._store.list_for_owner(username)
        except Exception as e:
            raise PersistenceError(f"Failed to get bookmarks: {str(e)}") from e

    async def remove_bookmark(self, username: str, question_id: str) -> Bookmark:
        """Remove a bookmark and pull the question from the default collection.

        Args:
            username: Owner of the bookmark
            question_id: ID of the question to unbookmark

        Returns:
            The deleted bookmark

        Raises:
            InvalidInputError: If username or question_id is blank
            BookmarkNotFoundError: If the user has no bookmark on the question
            PersistenceError: If removal fails
        """
        username = require_text(username, "username")
        question_id = require_text(question_id, "question_id")
        try:
            existing = self._store.find(username, question_id)
        except Exception as e:
            raise PersistenceError(f"Failed to remove bookmark: {str(e)}") from e
        if existing is None:
            raise BookmarkNotFoundError("Bookmark not found")

        try:
            deleted = self._store.delete(username, question_id)
        except Exception as e:
            raise PersistenceError(f"Failed to remove bookmark: {str(e)}") from e
        if not deleted:
            raise BookmarkNotFoundError("Bookmark not found")
        logger.info("%s removed bookmark on %s", username, question_id)
        await self._default_collections.remove_question(username, question_id)
        return deleted[0]

    async def is_bookmarked(self, username: str, question_id: str) -> bool:
        """Check whether a user has bookmarked a question.

        Raises:
            PersistenceError: If check fails
        """
        username = require_text(username, "username")
        question_id = require_text(question_id, "question_id")
        try:
            return self._store.find(username, question_id) is not None
        except Exception as e:
            raise PersistenceError(f"Failed to check bookmark status: {str(e)}") from e
