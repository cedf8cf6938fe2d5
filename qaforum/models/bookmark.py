from datetime import datetime

from pydantic import UUID4, BaseModel, ConfigDict, Field


class BookmarkBase(BaseModel):
    """Base model for bookmark data.

    This model contains the common fields shared between Bookmark and BookmarkCreate.

    Attributes:
        question_id: Opaque identifier of the bookmarked question
    """

    model_config = ConfigDict(frozen=True)

    question_id: str = Field(min_length=1)


class BookmarkCreate(BookmarkBase):
    """Model for creating a new bookmark.

    The owner is taken from the request path, never from the body.
    """

    pass


class Bookmark(BookmarkBase):
    """Model representing a user's saved reference to a question.

    Bookmarks are never mutated after creation. The store does not enforce
    one bookmark per (username, question_id) pair.

    Attributes:
        bookmark_id: Unique identifier for the bookmark
        username: Username of the bookmark owner
        question_id: Opaque identifier of the bookmarked question
        created_at: When the bookmark was created
    """

    model_config = ConfigDict(frozen=True)

    bookmark_id: UUID4
    username: str = Field(min_length=1)
    created_at: datetime
