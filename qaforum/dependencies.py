from qaforum.services.bookmark import BookmarkService
from qaforum.services.collection import CollectionService
from qaforum.services.notification import NotificationHub, NotificationSink
from qaforum.services.theme_vote import ThemeVoteService

# Services hold no connection state; stores open a session per call.
bookmark_service = BookmarkService()
collection_service = CollectionService()
theme_vote_service = ThemeVoteService()
notification_hub = NotificationHub()


def get_bookmark_service() -> BookmarkService:
    return bookmark_service


def get_collection_service() -> CollectionService:
    return collection_service


def get_theme_vote_service() -> ThemeVoteService:
    return theme_vote_service


def get_notification_sink() -> NotificationSink:
    """Dependency for the sink that receives post-commit events.

    Override this in the application to plug in a real-time transport.
    """
    return notification_hub
