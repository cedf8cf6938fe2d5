import logging

from qaforum.errors import InvalidInputError, PersistenceError, ThemeNotFoundError
from qaforum.models.theme_vote import ThemeVote, ThemeVoteResult, VoteType
from qaforum.stores.theme_vote import ThemeVoteStore
from qaforum.utils.validation import require_text

logger = logging.getLogger(__name__)

# (message when the user ends up in the target set, message when cancelled)
_VOTE_MESSAGES: dict[VoteType, tuple[str, str]] = {
    VoteType.UPVOTE: ("Theme upvoted successfully", "Upvote cancelled successfully"),
    VoteType.DOWNVOTE: (
        "Theme downvoted successfully",
        "Downvote cancelled successfully",
    ),
}


class ThemeVoteService:
    """Service for theme upvotes and downvotes.

    Per theme and user the vote is one of none, upvoted or downvoted.
    Repeating a vote cancels it and voting the other way switches it; the
    store applies each transition as a single atomic update.
    """

    def __init__(self, store: ThemeVoteStore | None = None) -> None:
        self._store = store or ThemeVoteStore()

    async def vote(
        self, theme: str, username: str, vote_type: VoteType | str
    ) -> ThemeVoteResult:
        """Toggle a user's vote on a theme.

        Args:
            theme: Name of the theme
            username: Username of the voter
            vote_type: "upvote" or "downvote"

        Returns:
            The post-update vote sets and a message naming the transition

        Raises:
            InvalidInputError: If a field is blank or the vote type is unknown
            ThemeNotFoundError: If the vote record vanished after being ensured
            PersistenceError: If a store call fails
        """
        theme = require_text(theme, "theme")
        username = require_text(username, "username")
        try:
            vote_type = VoteType(vote_type)
        except ValueError as e:
            raise InvalidInputError(f"Unknown vote type: {vote_type}") from e

        try:
            self._store.ensure(theme)
            updated = self._store.toggle(theme, username, vote_type)
        except Exception as e:
            raise PersistenceError(
                f"Error when adding {vote_type.value} to theme: {str(e)}"
            ) from e
        if updated is None:
            raise ThemeNotFoundError("Theme not found!")

        if vote_type is VoteType.UPVOTE:
            target = updated.up_votes
        else:
            target = updated.down_votes
        applied, cancelled = _VOTE_MESSAGES[vote_type]
        msg = applied if username in target else cancelled
        logger.info("%s on theme %s: %s", username, theme, msg)
        return ThemeVoteResult(
            theme=updated.theme,
            up_votes=updated.up_votes,
            down_votes=updated.down_votes,
            msg=msg,
        )

    async def get_theme_vote(self, theme: str) -> ThemeVote:
        """Get the current vote sets of one theme.

        Raises:
            ThemeNotFoundError: If nobody has voted on the theme yet
            PersistenceError: If the store call fails
        """
        theme = require_text(theme, "theme")
        try:
            theme_vote = self._store.get(theme)
        except Exception as e:
            raise PersistenceError(f"Error fetching theme votes: {str(e)}") from e
        if theme_vote is None:
            raise ThemeNotFoundError("Theme not found!")
        return theme_vote

    async def get_theme_votes(self) -> list[ThemeVote]:
        try:
            return self._store.list_all()
        except Exception as e:
            raise PersistenceError(f"Error fetching theme votes: {str(e)}") from e
