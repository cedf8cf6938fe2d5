from typing import Annotated

from fastapi import APIRouter, Depends, status

from qaforum.api.errors import http_error
from qaforum.dependencies import get_bookmark_service, get_notification_sink
from qaforum.errors import ForumError
from qaforum.models.bookmark import Bookmark, BookmarkCreate
from qaforum.models.notification import BookmarkAddedEvent, BookmarkRemovedEvent
from qaforum.services.bookmark import BookmarkService
from qaforum.services.notification import NotificationSink

router = APIRouter(prefix="/bookmark", tags=["bookmark"])


@router.post(
    "/{username}", response_model=Bookmark, status_code=status.HTTP_201_CREATED
)
async def bookmark_question(
    username: str,
    bookmark: BookmarkCreate,
    bookmark_service: Annotated[BookmarkService, Depends(get_bookmark_service)],
    sink: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> Bookmark:
    """Bookmark a question.

    Args:
        username: Owner of the bookmark
        bookmark: The bookmark data
        bookmark_service: Injected bookmark service
        sink: Injected notification sink

    Returns:
        The created bookmark

    Raises:
        HTTPException: If bookmark creation fails
    """
    try:
        created = await bookmark_service.create_bookmark(username, bookmark.question_id)
    except ForumError as e:
        raise http_error(e)
    await sink.publish(
        BookmarkAddedEvent(question_id=created.question_id, username=created.username)
    )
    return created


@router.get("/{username}", response_model=list[Bookmark])
async def get_bookmarks(
    username: str,
    bookmark_service: Annotated[BookmarkService, Depends(get_bookmark_service)],
) -> list[Bookmark]:
    try:
        return await bookmark_service.get_bookmarks(username)
    except ForumError as e:
        raise http_error(e)


@router.get("/{username}/{question_id}/check", response_model=bool)
async def check_bookmark(
    username: str,
    question_id: str,
    bookmark_service: Annotated[BookmarkService, Depends(get_bookmark_service)],
) -> bool:
    try:
        return await bookmark_service.is_bookmarked(username, question_id)
    except ForumError as e:
        raise http_error(e)


@router.delete("/{username}/{question_id}", response_model=Bookmark)
async def remove_bookmark(
    username: str,
    question_id: str,
    bookmark_service: Annotated[BookmarkService, Depends(get_bookmark_service)],
    sink: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> Bookmark:
    """Remove a bookmark.

    Args:
        username: Owner of the bookmark
        question_id: ID of the question to unbookmark
        bookmark_service: Injected bookmark service
        sink: Injected notification sink

    Returns:
        The deleted bookmark

    Raises:
        HTTPException: If the bookmark does not exist or removal fails
    """
    try:
        deleted = await bookmark_service.remove_bookmark(username, question_id)
    except ForumError as e:
        raise http_error(e)
    await sink.publish(
        BookmarkRemovedEvent(question_id=deleted.question_id, username=deleted.username)
    )
    return deleted
