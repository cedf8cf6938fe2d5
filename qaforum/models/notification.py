from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class NotificationEventType(str, Enum):
    """Events pushed to real-time subscribers after a successful commit.

    Attributes:
        BOOKMARK_ADDED: A question was bookmarked or added to a collection
        BOOKMARK_REMOVED: A bookmark was deleted
        THEME_VOTE_UPDATE: The vote sets of a theme changed
    """

    BOOKMARK_ADDED = "bookmarkAdded"
    BOOKMARK_REMOVED = "bookmarkRemoved"
    THEME_VOTE_UPDATE = "themeVoteUpdate"


class BookmarkAddedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: Literal[NotificationEventType.BOOKMARK_ADDED] = (
        NotificationEventType.BOOKMARK_ADDED
    )
    question_id: str = Field(description="ID of the bookmarked question")
    username: str = Field(description="Username of the bookmark owner")


class BookmarkRemovedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: Literal[NotificationEventType.BOOKMARK_REMOVED] = (
        NotificationEventType.BOOKMARK_REMOVED
    )
    question_id: str = Field(description="ID of the unbookmarked question")
    username: str = Field(description="Username of the bookmark owner")


class ThemeVoteUpdateEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: Literal[NotificationEventType.THEME_VOTE_UPDATE] = (
        NotificationEventType.THEME_VOTE_UPDATE
    )
    theme: str = Field(description="Name of the theme")
    up_votes: list[str] = Field(description="Usernames that upvoted the theme")
    down_votes: list[str] = Field(description="Usernames that downvoted the theme")


NotificationEvent = BookmarkAddedEvent | BookmarkRemovedEvent | ThemeVoteUpdateEvent
