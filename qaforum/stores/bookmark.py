from datetime import UTC, datetime
from uuid import uuid4

from neo4j import ManagedTransaction

from qaforum.db import DatabaseManager, node_properties
from qaforum.models.bookmark import Bookmark


class BookmarkStore:
    """Neo4j persistence for bookmark records.

    Each bookmark is a standalone ``:Bookmark`` node. Driver exceptions are
    left to propagate; the service layer wraps them.
    """

    def create(self, username: str, question_id: str) -> Bookmark:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._create_bookmark, username, question_id)

    def _create_bookmark(
        self, tx: ManagedTransaction, username: str, question_id: str
    ) -> Bookmark:
        query = """
        CREATE (b:Bookmark {
            bookmark_id: $bookmark_id,
            username: $username,
            question_id: $question_id,
            created_at: $current_time
        })
        RETURN b
        """
        result = tx.run(
            query,
            bookmark_id=str(uuid4()),
            username=username,
            question_id=question_id,
            current_time=datetime.now(UTC),
        )
        record = result.single()
        return Bookmark(**node_properties(record["b"]))

    def list_for_owner(self, username: str) -> list[Bookmark]:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._list_bookmarks, username)

    def _list_bookmarks(self, tx: ManagedTransaction, username: str) -> list[Bookmark]:
        query = """
        MATCH (b:Bookmark {username: $username})
        RETURN b
        """
        result = tx.run(query, username=username)
        return [Bookmark(**node_properties(record["b"])) for record in result]

    def find(self, username: str, question_id: str) -> Bookmark | None:
        """Return the oldest bookmark of ``question_id`` owned by ``username``."""
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._find_bookmark, username, question_id)

    def _find_bookmark(
        self, tx: ManagedTransaction, username: str, question_id: str
    ) -> Bookmark | None:
        query = """
        MATCH (b:Bookmark {username: $username, question_id: $question_id})
        RETURN b
        ORDER BY b.created_at
        LIMIT 1
        """
        result = tx.run(query, username=username, question_id=question_id)
        if record := result.single():
            return Bookmark(**node_properties(record["b"]))
        return None

    def delete(self, username: str, question_id: str) -> list[Bookmark]:
        """Delete every bookmark of ``question_id`` owned by ``username``.

        Duplicates are removed together so the default collection can drop the
        question without leaving a live bookmark behind.

        Returns:
            The deleted bookmarks, oldest first; empty if none matched
        """
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._delete_bookmarks, username, question_id)

    def _delete_bookmarks(
        self, tx: ManagedTransaction, username: str, question_id: str
    ) -> list[Bookmark]:
        query = """
        MATCH (b:Bookmark {username: $username, question_id: $question_id})
        WITH b, properties(b) AS deleted
        DELETE b
        RETURN deleted
        ORDER BY deleted.created_at
        """
        result = tx.run(query, username=username, question_id=question_id)
        return [Bookmark(**node_properties(record["deleted"])) for record in result]
