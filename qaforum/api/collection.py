from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import UUID4

from qaforum.api.errors import http_error
from qaforum.dependencies import get_collection_service, get_notification_sink
from qaforum.errors import ForumError
from qaforum.models.collection import (
    AddReferenceResult,
    Collection,
    CollectionBookmarkAdd,
    CollectionCreate,
    CollectionRename,
    ReferenceAdded,
)
from qaforum.models.notification import BookmarkAddedEvent
from qaforum.services.collection import CollectionService
from qaforum.services.notification import NotificationSink
from qaforum.utils.validation import require_text

router = APIRouter(prefix="/collection", tags=["collection"])


@router.post(
    "/{username}", response_model=Collection, status_code=status.HTTP_201_CREATED
)
async def create_collection(
    username: str,
    collection: CollectionCreate,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> Collection:
    """Create a new bookmark collection.

    Args:
        username: Owner of the collection
        collection: The collection data
        collection_service: Injected collection service

    Returns:
        The created collection

    Raises:
        HTTPException: If collection creation fails
    """
    try:
        return await collection_service.create_collection(username, collection.name)
    except ForumError as e:
        raise http_error(e)


@router.get("/{username}", response_model=list[Collection])
async def get_collections(
    username: str,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> list[Collection]:
    try:
        return await collection_service.get_collections(username)
    except ForumError as e:
        raise http_error(e)


@router.get("/{username}/default", response_model=Collection)
async def get_default_collection(
    username: str,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> Collection:
    try:
        return await collection_service.get_default_collection(username)
    except ForumError as e:
        raise http_error(e)


@router.post("/{username}/default/sync", response_model=Collection)
async def sync_default_collection(
    username: str,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> Collection:
    """Rebuild the default collection from the user's bookmarks.

    Safe to call at any time; it only repairs drift left by a failed write.
    """
    try:
        return await collection_service.sync_default_collection(username)
    except ForumError as e:
        raise http_error(e)


@router.put("/{username}/{collection_id}", response_model=Collection)
async def rename_collection(
    username: str,
    collection_id: UUID4,
    collection: CollectionRename,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> Collection:
    """Rename a bookmark collection.

    Raises:
        HTTPException: If the collection is missing or is the default one
    """
    try:
        return await collection_service.rename_collection(
            username, collection_id, collection.name
        )
    except ForumError as e:
        raise http_error(e)


@router.delete("/{username}/{collection_id}", response_model=Collection)
async def delete_collection(
    username: str,
    collection_id: UUID4,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> Collection:
    """Delete a bookmark collection.

    Raises:
        HTTPException: If the collection is missing or is the default one
    """
    try:
        return await collection_service.delete_collection(username, collection_id)
    except ForumError as e:
        raise http_error(e)


@router.post(
    "/{username}/{collection_id}/bookmarks", response_model=AddReferenceResult
)
async def add_bookmark_to_collection(
    username: str,
    collection_id: UUID4,
    bookmark: CollectionBookmarkAdd,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
    sink: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> AddReferenceResult:
    """Add a bookmarked question to a collection.

    A question that is already in the collection comes back as a warning
    result and no event is published for it.

    Args:
        username: Owner of the collection
        collection_id: ID of the collection
        bookmark: The question to add
        collection_service: Injected collection service
        sink: Injected notification sink

    Returns:
        The added or already-exists result with the collection

    Raises:
        HTTPException: If the collection is missing or is the default one
    """
    try:
        result = await collection_service.add_bookmark(
            username, collection_id, bookmark.question_id
        )
    except ForumError as e:
        raise http_error(e)
    if isinstance(result, ReferenceAdded):
        await sink.publish(
            BookmarkAddedEvent(
                question_id=require_text(bookmark.question_id, "question_id"),
                username=result.collection.username,
            )
        )
    return result


@router.delete(
    "/{username}/{collection_id}/bookmarks/{question_id}", response_model=Collection
)
async def remove_bookmark_from_collection(
    username: str,
    collection_id: UUID4,
    question_id: str,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> Collection:
    try:
        return await collection_service.remove_bookmark(
            username, collection_id, question_id
        )
    except ForumError as e:
        raise http_error(e)


@router.get("/{username}/{collection_id}", response_model=list[str])
async def get_collection_bookmarks(
    username: str,
    collection_id: UUID4,
    collection_service: Annotated[CollectionService, Depends(get_collection_service)],
) -> list[str]:
    """Get the question ids referenced by a collection."""
    try:
        return await collection_service.get_collection_bookmarks(collection_id)
    except ForumError as e:
        raise http_error(e)
