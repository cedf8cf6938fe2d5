import itertools
from unittest.mock import patch

import pytest

from qaforum.errors import InvalidInputError, PersistenceError, ThemeNotFoundError
from qaforum.models.theme_vote import VoteType
from qaforum.services.theme_vote import ThemeVoteService
from tests.fakes import InMemoryThemeVoteStore


@pytest.mark.unit
class TestThemeVoteService:
    @pytest.mark.asyncio
    async def test_upvote_from_none(self, theme_vote_service: ThemeVoteService):
        # Act
        result = await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)

        # Assert
        assert result.theme == "dark"
        assert result.up_votes == ["bob"]
        assert result.down_votes == []
        assert result.msg == "Theme upvoted successfully"

    @pytest.mark.asyncio
    async def test_downvote_from_none(self, theme_vote_service: ThemeVoteService):
        # Act
        result = await theme_vote_service.vote("dark", "bob", "downvote")

        # Assert
        assert result.up_votes == []
        assert result.down_votes == ["bob"]
        assert result.msg == "Theme downvoted successfully"

    @pytest.mark.asyncio
    async def test_repeat_upvote_cancels_and_third_re_adds(
        self, theme_vote_service: ThemeVoteService
    ):
        # Act
        await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)
        cancelled = await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)
        re_added = await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)

        # Assert
        assert "bob" not in cancelled.up_votes
        assert cancelled.msg == "Upvote cancelled successfully"
        assert re_added.up_votes == ["bob"]

    @pytest.mark.asyncio
    async def test_repeat_downvote_cancels(self, theme_vote_service: ThemeVoteService):
        # Act
        await theme_vote_service.vote("dark", "bob", VoteType.DOWNVOTE)
        result = await theme_vote_service.vote("dark", "bob", VoteType.DOWNVOTE)

        # Assert
        assert result.down_votes == []
        assert result.msg == "Downvote cancelled successfully"

    @pytest.mark.asyncio
    async def test_downvote_switches_from_upvote(
        self, theme_vote_service: ThemeVoteService
    ):
        # Arrange
        upvoted = await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)
        assert upvoted.up_votes == ["bob"]

        # Act
        result = await theme_vote_service.vote("dark", "bob", VoteType.DOWNVOTE)

        # Assert
        assert result.up_votes == []
        assert result.down_votes == ["bob"]
        assert result.msg == "Theme downvoted successfully"

    @pytest.mark.asyncio
    async def test_upvote_switches_from_downvote(
        self, theme_vote_service: ThemeVoteService
    ):
        # Arrange
        await theme_vote_service.vote("dark", "bob", VoteType.DOWNVOTE)

        # Act
        result = await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)

        # Assert
        assert result.up_votes == ["bob"]
        assert result.down_votes == []

    @pytest.mark.asyncio
    async def test_votes_never_overlap(self, theme_vote_service: ThemeVoteService):
        # Every four-vote sequence for two users keeps each user in one set at most
        for sequence in itertools.product(list(VoteType), repeat=4):
            theme = "theme-" + "-".join(v.value for v in sequence)
            for vote_type in sequence:
                for username in ("bob", "carol"):
                    result = await theme_vote_service.vote(theme, username, vote_type)
                    assert not set(result.up_votes) & set(result.down_votes)

    @pytest.mark.asyncio
    async def test_votes_are_per_theme(self, theme_vote_service: ThemeVoteService):
        # Act
        await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)
        result = await theme_vote_service.vote("light", "bob", VoteType.DOWNVOTE)

        # Assert
        assert result.down_votes == ["bob"]
        dark = await theme_vote_service.get_theme_vote("dark")
        assert dark.up_votes == ["bob"]

    @pytest.mark.asyncio
    async def test_unknown_vote_type_fails(self, theme_vote_service: ThemeVoteService):
        # Act & Assert
        with pytest.raises(InvalidInputError, match="Unknown vote type"):
            await theme_vote_service.vote("dark", "bob", "sidevote")

    @pytest.mark.asyncio
    async def test_blank_theme_fails(self, theme_vote_service: ThemeVoteService):
        # Act & Assert
        with pytest.raises(InvalidInputError):
            await theme_vote_service.vote("", "bob", VoteType.UPVOTE)

    @pytest.mark.asyncio
    async def test_missing_record_after_ensure_fails(
        self,
        theme_vote_service: ThemeVoteService,
        theme_vote_store: InMemoryThemeVoteStore,
    ):
        # Arrange
        with patch.object(theme_vote_store, "ensure"):
            # Act & Assert
            with pytest.raises(ThemeNotFoundError):
                await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)

    @pytest.mark.asyncio
    async def test_store_failure(
        self,
        theme_vote_service: ThemeVoteService,
        theme_vote_store: InMemoryThemeVoteStore,
    ):
        # Arrange
        with patch.object(theme_vote_store, "toggle") as mock_toggle:
            mock_toggle.side_effect = RuntimeError("unavailable")

            # Act & Assert
            with pytest.raises(PersistenceError, match="Error when adding upvote"):
                await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)

    @pytest.mark.asyncio
    async def test_get_theme_votes(self, theme_vote_service: ThemeVoteService):
        # Arrange
        await theme_vote_service.vote("light", "carol", VoteType.DOWNVOTE)
        await theme_vote_service.vote("dark", "bob", VoteType.UPVOTE)

        # Act
        result = await theme_vote_service.get_theme_votes()

        # Assert
        assert [(t.theme, t.up_votes, t.down_votes) for t in result] == [
            ("dark", ["bob"], []),
            ("light", [], ["carol"]),
        ]

    @pytest.mark.asyncio
    async def test_get_theme_vote_missing(self, theme_vote_service: ThemeVoteService):
        # Act & Assert
        with pytest.raises(ThemeNotFoundError):
            await theme_vote_service.get_theme_vote("dark")
