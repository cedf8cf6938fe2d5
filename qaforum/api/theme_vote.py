from typing import Annotated

from fastapi import APIRouter, Depends

from qaforum.api.errors import http_error
from qaforum.dependencies import get_notification_sink, get_theme_vote_service
from qaforum.errors import ForumError
from qaforum.models.notification import ThemeVoteUpdateEvent
from qaforum.models.theme_vote import (
    ThemeVote,
    ThemeVoteRequest,
    ThemeVoteResult,
    VoteType,
)
from qaforum.services.notification import NotificationSink
from qaforum.services.theme_vote import ThemeVoteService

router = APIRouter(prefix="/theme", tags=["theme"])


async def _vote(
    request: ThemeVoteRequest,
    vote_type: VoteType,
    theme_vote_service: ThemeVoteService,
    sink: NotificationSink,
) -> ThemeVoteResult:
    try:
        result = await theme_vote_service.vote(
            request.theme_name, request.username, vote_type
        )
    except ForumError as e:
        raise http_error(e)
    await sink.publish(
        ThemeVoteUpdateEvent(
            theme=result.theme, up_votes=result.up_votes, down_votes=result.down_votes
        )
    )
    return result


@router.post("/upvote", response_model=ThemeVoteResult)
async def upvote_theme(
    request: ThemeVoteRequest,
    theme_vote_service: Annotated[ThemeVoteService, Depends(get_theme_vote_service)],
    sink: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> ThemeVoteResult:
    """Upvote a theme, or cancel an existing upvote.

    Args:
        request: Theme name and voter
        theme_vote_service: Injected theme vote service
        sink: Injected notification sink

    Returns:
        The updated vote sets and a status message
    """
    return await _vote(request, VoteType.UPVOTE, theme_vote_service, sink)


@router.post("/downvote", response_model=ThemeVoteResult)
async def downvote_theme(
    request: ThemeVoteRequest,
    theme_vote_service: Annotated[ThemeVoteService, Depends(get_theme_vote_service)],
    sink: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> ThemeVoteResult:
    """Downvote a theme, or cancel an existing downvote."""
    return await _vote(request, VoteType.DOWNVOTE, theme_vote_service, sink)


@router.get("/votes", response_model=list[ThemeVote])
async def get_theme_votes(
    theme_vote_service: Annotated[ThemeVoteService, Depends(get_theme_vote_service)],
) -> list[ThemeVote]:
    try:
        return await theme_vote_service.get_theme_votes()
    except ForumError as e:
        raise http_error(e)


@router.get("/votes/{theme}", response_model=ThemeVote)
async def get_theme_vote(
    theme: str,
    theme_vote_service: Annotated[ThemeVoteService, Depends(get_theme_vote_service)],
) -> ThemeVote:
    try:
        return await theme_vote_service.get_theme_vote(theme)
    except ForumError as e:
        raise http_error(e)
