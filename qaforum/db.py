from os import environ
from typing import Any, Mapping

from neo4j import Driver, GraphDatabase

from qaforum.utils.meta import SingletonMeta

SCHEMA_CONSTRAINTS: tuple[str, ...] = (
    "CREATE CONSTRAINT bookmark_id IF NOT EXISTS "
    "FOR (b:Bookmark) REQUIRE b.bookmark_id IS UNIQUE",
    "CREATE CONSTRAINT collection_id IF NOT EXISTS "
    "FOR (c:Collection) REQUIRE c.collection_id IS UNIQUE",
    # Only default collections carry default_owner, so this allows one per user.
    "CREATE CONSTRAINT collection_default_owner IF NOT EXISTS "
    "FOR (c:Collection) REQUIRE c.default_owner IS UNIQUE",
    "CREATE CONSTRAINT theme_vote_theme IF NOT EXISTS "
    "FOR (t:ThemeVote) REQUIRE t.theme IS UNIQUE",
)


class DatabaseManager(metaclass=SingletonMeta):
    """Singleton manager for Neo4j database connections.

    This class manages the lifecycle of Neo4j database connections, ensuring
    only one driver is active at a time and handling connection pooling.

    Attributes:
        _driver: The Neo4j driver instance
        _uri: URI of the Neo4j database
        _auth: Tuple of username and password for authentication
        _database: Name of the Neo4j database to connect to
    """

    def __init__(self) -> None:
        """Initialize the database manager.

        Reads connection parameters from the environment and verifies
        connectivity.

        Raises:
            neo4j.exceptions.ServiceUnavailable: If database is not reachable
            neo4j.exceptions.AuthError: If credentials are invalid
        """
        self._driver: Driver | None = None
        self._uri: str = environ.get("NEO4J_URI", "bolt://localhost:7687")
        self._auth: tuple[str, str] = (
            environ.get("NEO4J_USER", "neo4j"),
            environ.get("NEO4J_PASSWORD", ""),
        )
        self._database: str = environ.get("NEO4J_DATABASE", "neo4j")
        self._verify_connectivity()

    def _verify_connectivity(self) -> None:
        """Verify database connectivity with current credentials.

        Called during initialization so a bad URI or credentials fail fast.

        Raises:
            neo4j.exceptions.ServiceUnavailable: If database is not reachable
            neo4j.exceptions.AuthError: If credentials are invalid
        """
        with GraphDatabase.driver(self._uri, auth=self._auth) as test_driver:
            test_driver.verify_connectivity()

    @property
    def driver(self) -> Driver:
        """Get or create the Neo4j driver instance.

        Returns:
            The Neo4j driver instance that can be used for database operations
        """
        if not self._driver:
            self._driver = GraphDatabase.driver(
                self._uri,
                auth=self._auth,
                max_connection_pool_size=10,  # Default is 100
                connection_timeout=30,  # Seconds
            )
        return self._driver

    @property
    def database(self) -> str:
        """Get the name of the Neo4j database."""
        return self._database

    def ensure_schema(self) -> None:
        """Create the uniqueness constraints the stores rely on.

        Every statement is idempotent, so this is safe to run on each startup.
        """
        with self.driver.session(database=self._database) as session:
            for statement in SCHEMA_CONSTRAINTS:
                session.run(statement).consume()

    def close(self) -> None:
        """Close the database connection.

        This method should be called when shutting down the application.
        If no connection exists, this is a no-op.
        """
        if self._driver:
            self._driver.close()
            self._driver = None


def node_properties(node: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a node's properties, converting Neo4j temporal values to stdlib ones."""
    properties = {}
    for key, value in dict(node).items():
        if hasattr(value, "to_native"):
            value = value.to_native()
        properties[key] = value
    return properties
