from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class VoteType(str, Enum):
    """Kinds of theme vote a user can cast.

    Attributes:
        UPVOTE: Toggle membership in the upvoters set
        DOWNVOTE: Toggle membership in the downvoters set
    """

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class ThemeVote(BaseModel):
    """Snapshot of the votes cast on one theme.

    A username appears in at most one of ``up_votes`` and ``down_votes``.

    Attributes:
        theme: Name of the theme
        up_votes: Usernames that upvoted the theme
        down_votes: Usernames that downvoted the theme
    """

    model_config = ConfigDict(frozen=True)

    theme: str = Field(min_length=1)
    up_votes: list[str] = Field(default_factory=list)
    down_votes: list[str] = Field(default_factory=list)


class ThemeVoteResult(ThemeVote):
    """Post-update snapshot returned by a vote, with a status message."""

    msg: str


class ThemeVoteRequest(BaseModel):
    """Request body for casting a theme vote."""

    model_config = ConfigDict(frozen=True)

    theme_name: str = Field(min_length=1)
    username: str = Field(min_length=1)
