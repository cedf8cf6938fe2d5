from datetime import datetime
from typing import Literal

from pydantic import UUID4, BaseModel, ConfigDict, Field

DEFAULT_COLLECTION_NAME = "All Bookmarks"


class CollectionBase(BaseModel):
    """Base model for collection data.

    Attributes:
        name: Display name of the collection
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)


class CollectionCreate(CollectionBase):
    """Model for creating a new, always non-default, collection."""

    pass


class CollectionRename(CollectionBase):
    """Model for renaming an existing collection."""

    pass


class CollectionBookmarkAdd(BaseModel):
    """Request body for adding a question reference to a collection."""

    model_config = ConfigDict(frozen=True)

    question_id: str = Field(min_length=1)


class Collection(CollectionBase):
    """Model representing a named set of bookmarked-question references.

    Exactly one collection per user has ``is_default`` set. That collection is
    kept in step with the user's bookmarks and cannot be renamed or deleted.

    Attributes:
        collection_id: Unique identifier for the collection
        username: Username of the collection owner
        name: Display name of the collection
        bookmarks: Question ids in the collection, with set semantics
        is_default: Whether this is the user's "All Bookmarks" collection
        created_at: When the collection was created
        updated_at: When the collection was last updated
    """

    model_config = ConfigDict(frozen=True)

    collection_id: UUID4
    username: str = Field(min_length=1)
    bookmarks: list[str] = Field(default_factory=list)
    is_default: bool = False
    created_at: datetime
    updated_at: datetime


class ReferenceAdded(BaseModel):
    """The question id was added to the collection."""

    model_config = ConfigDict(frozen=True)

    status: Literal["added"] = "added"
    collection: Collection


class ReferenceAlreadyExists(BaseModel):
    """The question id was already present; the collection is unchanged.

    This is a warning, not an error. Callers must not announce an add for it.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["already_exists"] = "already_exists"
    already_exists: Literal[True] = True
    message: str = "Bookmark already exists in this collection"
    collection: Collection


AddReferenceResult = ReferenceAdded | ReferenceAlreadyExists
