from datetime import UTC, datetime
from uuid import uuid4

from neo4j import ManagedTransaction

from qaforum.db import DatabaseManager, node_properties
from qaforum.models.collection import DEFAULT_COLLECTION_NAME, Collection


class CollectionStore:
    """Neo4j persistence for bookmark collections.

    A collection is one ``:Collection`` node whose ``bookmarks`` list property
    holds question ids. The list is only ever changed with add-if-absent and
    filter-out updates, each in a single statement that takes the node write
    lock before reading the list, so concurrent updates converge.

    Lookups and mutations are scoped by ``username`` as well as by id.
    Methods return ``None`` when no owned collection matches.
    """

    def get_or_create_default(self, username: str) -> Collection:
        """Find or create the user's "All Bookmarks" collection in one statement.

        ``default_owner`` is only set on default collections and is unique, so
        racing first calls merge onto the same node.
        """
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._merge_default, username)

    def _merge_default(self, tx: ManagedTransaction, username: str) -> Collection:
        query = """
        MERGE (c:Collection {default_owner: $username})
        ON CREATE
            SET c.collection_id = $collection_id,
                c.username = $username,
                c.name = $name,
                c.bookmarks = [],
                c.is_default = true,
                c.created_at = $current_time,
                c.updated_at = $current_time
        RETURN c
        """
        result = tx.run(
            query,
            username=username,
            collection_id=str(uuid4()),
            name=DEFAULT_COLLECTION_NAME,
            current_time=datetime.now(UTC),
        )
        record = result.single()
        return Collection(**node_properties(record["c"]))

    def create(self, username: str, name: str) -> Collection:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._create_collection, username, name)

    def _create_collection(
        self, tx: ManagedTransaction, username: str, name: str
    ) -> Collection:
        query = """
        CREATE (c:Collection {
            collection_id: $collection_id,
            username: $username,
            name: $name,
            bookmarks: [],
            is_default: false,
            created_at: $current_time,
            updated_at: $current_time
        })
        RETURN c
        """
        result = tx.run(
            query,
            collection_id=str(uuid4()),
            username=username,
            name=name,
            current_time=datetime.now(UTC),
        )
        record = result.single()
        return Collection(**node_properties(record["c"]))

    def list_for_owner(self, username: str) -> list[Collection]:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._list_collections, username)

    def _list_collections(
        self, tx: ManagedTransaction, username: str
    ) -> list[Collection]:
        query = """
        MATCH (c:Collection {username: $username})
        RETURN c
        ORDER BY c.is_default DESC, c.created_at
        """
        result = tx.run(query, username=username)
        return [Collection(**node_properties(record["c"])) for record in result]

    def get(self, username: str, collection_id: str) -> Collection | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._get_collection, username, collection_id)

    def _get_collection(
        self, tx: ManagedTransaction, username: str, collection_id: str
    ) -> Collection | None:
        query = """
        MATCH (c:Collection {collection_id: $collection_id, username: $username})
        RETURN c
        """
        result = tx.run(query, collection_id=collection_id, username=username)
        if record := result.single():
            return Collection(**node_properties(record["c"]))
        return None

    def get_by_id(self, collection_id: str) -> Collection | None:
        """Look a collection up by id alone, for read-only reference listing."""
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._get_collection_by_id, collection_id)

    def _get_collection_by_id(
        self, tx: ManagedTransaction, collection_id: str
    ) -> Collection | None:
        query = """
        MATCH (c:Collection {collection_id: $collection_id})
        RETURN c
        """
        result = tx.run(query, collection_id=collection_id)
        if record := result.single():
            return Collection(**node_properties(record["c"]))
        return None

    def rename(self, username: str, collection_id: str, name: str) -> Collection | None:
        """Rename a non-default collection; default collections never match."""
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(
                self._rename_collection, username, collection_id, name
            )

    def _rename_collection(
        self, tx: ManagedTransaction, username: str, collection_id: str, name: str
    ) -> Collection | None:
        query = """
        MATCH (c:Collection {collection_id: $collection_id, username: $username})
        WHERE c.is_default = false
        SET c.name = $name,
            c.updated_at = $current_time
        RETURN c
        """
        result = tx.run(
            query,
            collection_id=collection_id,
            username=username,
            name=name,
            current_time=datetime.now(UTC),
        )
        if record := result.single():
            return Collection(**node_properties(record["c"]))
        return None

    def delete(self, username: str, collection_id: str) -> Collection | None:
        """Hard-delete a non-default collection; default collections never match."""
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(
                self._delete_collection, username, collection_id
            )

    def _delete_collection(
        self, tx: ManagedTransaction, username: str, collection_id: str
    ) -> Collection | None:
        query = """
        MATCH (c:Collection {collection_id: $collection_id, username: $username})
        WHERE c.is_default = false
        WITH c, properties(c) AS deleted
        DETACH DELETE c
        RETURN deleted
        """
        result = tx.run(query, collection_id=collection_id, username=username)
        if record := result.single():
            return Collection(**node_properties(record["deleted"]))
        return None

    def add_reference(
        self, username: str, collection_id: str, question_id: str
    ) -> Collection | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(
                self._add_reference, username, collection_id, question_id
            )

    def _add_reference(
        self,
        tx: ManagedTransaction,
        username: str,
        collection_id: str,
        question_id: str,
    ) -> Collection | None:
        # Writing _lock first takes the node write lock before the list is read.
        query = """
        MATCH (c:Collection {collection_id: $collection_id, username: $username})
        SET c._lock = true
        WITH c
        SET c.bookmarks = CASE
                WHEN $question_id IN coalesce(c.bookmarks, []) THEN c.bookmarks
                ELSE coalesce(c.bookmarks, []) + $question_id
            END,
            c.updated_at = $current_time
        REMOVE c._lock
        RETURN c
        """
        result = tx.run(
            query,
            collection_id=collection_id,
            username=username,
            question_id=question_id,
            current_time=datetime.now(UTC),
        )
        if record := result.single():
            return Collection(**node_properties(record["c"]))
        return None

    def remove_reference(
        self, username: str, collection_id: str, question_id: str
    ) -> Collection | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(
                self._remove_reference, username, collection_id, question_id
            )

    def _remove_reference(
        self,
        tx: ManagedTransaction,
        username: str,
        collection_id: str,
        question_id: str,
    ) -> Collection | None:
        query = """
        MATCH (c:Collection {collection_id: $collection_id, username: $username})
        SET c._lock = true
        WITH c
        SET c.bookmarks = [q IN coalesce(c.bookmarks, []) WHERE q <> $question_id],
            c.updated_at = $current_time
        REMOVE c._lock
        RETURN c
        """
        result = tx.run(
            query,
            collection_id=collection_id,
            username=username,
            question_id=question_id,
            current_time=datetime.now(UTC),
        )
        if record := result.single():
            return Collection(**node_properties(record["c"]))
        return None
