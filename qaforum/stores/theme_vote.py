from neo4j import ManagedTransaction

from qaforum.db import DatabaseManager, node_properties
from qaforum.models.theme_vote import ThemeVote, VoteType

# Each toggle is one statement: cancel if already in the target list, else
# append, and always drop the username from the opposite list.
_TOGGLE_QUERIES: dict[VoteType, str] = {
    VoteType.UPVOTE: """
        MATCH (t:ThemeVote {theme: $theme})
        SET t._lock = true
        WITH t
        SET t.up_votes = CASE
                WHEN $username IN coalesce(t.up_votes, [])
                    THEN [u IN t.up_votes WHERE u <> $username]
                ELSE coalesce(t.up_votes, []) + $username
            END,
            t.down_votes = [d IN coalesce(t.down_votes, []) WHERE d <> $username]
        REMOVE t._lock
        RETURN t
        """,
    VoteType.DOWNVOTE: """
        MATCH (t:ThemeVote {theme: $theme})
        SET t._lock = true
        WITH t
        SET t.down_votes = CASE
                WHEN $username IN coalesce(t.down_votes, [])
                    THEN [d IN t.down_votes WHERE d <> $username]
                ELSE coalesce(t.down_votes, []) + $username
            END,
            t.up_votes = [u IN coalesce(t.up_votes, []) WHERE u <> $username]
        REMOVE t._lock
        RETURN t
        """,
}


class ThemeVoteStore:
    """Neo4j persistence for per-theme upvoter and downvoter sets."""

    def ensure(self, theme: str) -> None:
        """Create an empty vote record for ``theme`` unless one exists."""
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            session.execute_write(self._merge_theme_vote, theme)

    def _merge_theme_vote(self, tx: ManagedTransaction, theme: str) -> None:
        query = """
        MERGE (t:ThemeVote {theme: $theme})
        ON CREATE
            SET t.up_votes = [],
                t.down_votes = []
        """
        tx.run(query, theme=theme).consume()

    def toggle(
        self, theme: str, username: str, vote_type: VoteType
    ) -> ThemeVote | None:
        """Apply one vote atomically and return the post-update sets."""
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(
                self._toggle_vote, theme, username, vote_type
            )

    def _toggle_vote(
        self,
        tx: ManagedTransaction,
        theme: str,
        username: str,
        vote_type: VoteType,
    ) -> ThemeVote | None:
        result = tx.run(_TOGGLE_QUERIES[vote_type], theme=theme, username=username)
        if record := result.single():
            return ThemeVote(**node_properties(record["t"]))
        return None

    def get(self, theme: str) -> ThemeVote | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._get_theme_vote, theme)

    def _get_theme_vote(
        self, tx: ManagedTransaction, theme: str
    ) -> ThemeVote | None:
        query = """
        MATCH (t:ThemeVote {theme: $theme})
        RETURN t
        """
        result = tx.run(query, theme=theme)
        if record := result.single():
            return ThemeVote(**node_properties(record["t"]))
        return None

    def list_all(self) -> list[ThemeVote]:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._list_theme_votes)

    def _list_theme_votes(self, tx: ManagedTransaction) -> list[ThemeVote]:
        query = """
        MATCH (t:ThemeVote)
        RETURN t
        ORDER BY t.theme
        """
        result = tx.run(query)
        return [ThemeVote(**node_properties(record["t"])) for record in result]
