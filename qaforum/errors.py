class ForumError(Exception):
    """Base exception for all bookmark, collection and theme vote errors."""

    pass


class InvalidInputError(ForumError):
    """Exception raised when a required field is missing or malformed."""

    pass


class NotFoundError(ForumError):
    """Exception raised when a record is absent or not owned by the caller."""

    pass


class BookmarkNotFoundError(NotFoundError):
    pass


class CollectionNotFoundError(NotFoundError):
    pass


class ThemeNotFoundError(NotFoundError):
    pass


class InvariantViolationError(ForumError):
    """Exception raised when an operation would break a collection invariant."""

    pass


class CannotRenameDefaultError(InvariantViolationError):
    pass


class CannotDeleteDefaultError(InvariantViolationError):
    pass


class PersistenceError(ForumError):
    """Exception raised when the underlying store call fails.

    Callers may retry the whole action; every operation is idempotent or
    near-idempotent.
    """

    pass
