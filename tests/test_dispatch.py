"""
Tests for the dispatch engine and reply dispatcher.

Tests:
- Category filtering
- First match wins
- Transform chains
- League commands
- Reply threading
"""

from dataclasses import replace

import pytest
from unittest.mock import AsyncMock, MagicMock

from chesster.auto_reply.commands import ListenerRegistry
from chesster.auto_reply.dispatch import DispatchEngine, ReplyDispatcher
from chesster.bus.events import ClassifiedMessage, CommandMessage, MessageCategory
from chesster.config.schema import LeagueConfig, LeagueLinks
from chesster.routing.leagues import LeagueDirectory


def classified(text, category, channel, ts="1.0", user="UHUMAN"):
    return ClassifiedMessage(category=category, text=text, user=user, channel=channel, ts=ts)


@pytest.fixture
def say():
    return AsyncMock()


class TestDispatchEngine:
    """Tests for listener selection."""

    @pytest.mark.asyncio
    async def test_direct_message_fires_with_matches(self, dm_channel, say):
        registry = ListenerRegistry()
        callback = AsyncMock()
        registry.hears([r"^source$"], ["direct_mention", "direct_message"], callback)
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("Source", MessageCategory.DIRECT_MESSAGE, dm_channel), say)

        callback.assert_awaited_once()
        message, passed_say = callback.await_args.args
        assert message.matches[0] == "Source"
        assert passed_say is say

    @pytest.mark.asyncio
    async def test_unwanted_category_does_not_fire(self, public_channel, say):
        registry = ListenerRegistry()
        callback = AsyncMock()
        registry.hears([r"^ping channel$"], ["direct_mention"], callback)
        engine = DispatchEngine(registry)

        result = await engine.dispatch(
            classified("ping channel", MessageCategory.AMBIENT, public_channel), say
        )

        assert result is None
        callback.assert_not_awaited()
        say.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_first_registered_wins(self, public_channel, say):
        registry = ListenerRegistry()
        first, second = AsyncMock(), AsyncMock()
        registry.hears([r"help"], ["ambient"], first)
        registry.hears([r"help"], ["ambient"], second)
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("help", MessageCategory.AMBIENT, public_channel), say)

        first.assert_awaited_once()
        second.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skips_to_listener_that_wants_category(self, public_channel, say):
        registry = ListenerRegistry()
        dm_only, ambient = AsyncMock(), AsyncMock()
        registry.hears([r"help"], ["direct_message"], dm_only)
        registry.hears([r"help"], ["ambient"], ambient)
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("help", MessageCategory.AMBIENT, public_channel), say)

        dm_only.assert_not_awaited()
        ambient.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_capture_groups(self, dm_channel, say):
        registry = ListenerRegistry()
        callback = AsyncMock()
        registry.hears([r"^rating (\w+)(?: (\w+))?$"], ["direct_message"], callback)
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("rating bob", MessageCategory.DIRECT_MESSAGE, dm_channel), say)

        message = callback.await_args.args[0]
        assert message.matches == ("rating bob", "bob", None)
        assert message.group(1) == "bob"
        assert message.group(2, "none") == "none"

    @pytest.mark.asyncio
    async def test_text_trimmed_in_command_message(self, dm_channel, say):
        registry = ListenerRegistry()
        callback = AsyncMock()
        registry.hears([r"source"], ["direct_message"], callback)
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("  source \n", MessageCategory.DIRECT_MESSAGE, dm_channel), say)

        message = callback.await_args.args[0]
        assert message.text == "source"
        assert message.user == "UHUMAN"
        assert message.ts == "1.0"
        assert message.category == MessageCategory.DIRECT_MESSAGE

    @pytest.mark.asyncio
    async def test_transforms_run_in_order(self, dm_channel, say):
        calls = []

        def first(message: CommandMessage) -> CommandMessage:
            calls.append("first")
            return replace(message, text=message.text + "-1")

        def second(message: CommandMessage) -> CommandMessage:
            calls.append("second")
            return replace(message, text=message.text + "-2")

        registry = ListenerRegistry()
        callback = AsyncMock()
        registry.hears([r"go"], ["direct_message"], callback, transforms=[first, second])
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("go", MessageCategory.DIRECT_MESSAGE, dm_channel), say)

        assert calls == ["first", "second"]
        assert callback.await_args.args[0].text == "go-1-2"

    @pytest.mark.asyncio
    async def test_sync_callback_supported(self, dm_channel, say):
        registry = ListenerRegistry()
        callback = MagicMock(return_value=None)
        registry.hears([r"go"], ["direct_message"], callback)
        engine = DispatchEngine(registry)

        await engine.dispatch(classified("go", MessageCategory.DIRECT_MESSAGE, dm_channel), say)

        callback.assert_called_once()

    @pytest.mark.asyncio
    async def test_callback_error_propagates(self, dm_channel, say):
        registry = ListenerRegistry()
        registry.hears([r"go"], ["direct_message"], AsyncMock(side_effect=RuntimeError("boom")))
        engine = DispatchEngine(registry)

        with pytest.raises(RuntimeError):
            await engine.dispatch(classified("go", MessageCategory.DIRECT_MESSAGE, dm_channel), say)

    def test_engine_freezes_registry(self):
        registry = ListenerRegistry()
        DispatchEngine(registry)
        assert registry.frozen


class TestLeagueCommands:
    """Tests for league-scoped listeners."""

    @pytest.mark.asyncio
    async def test_league_passed_to_callback(self, public_channel, say):
        leagues = LeagueDirectory({
            "team": LeagueConfig(channels=["general"], links=LeagueLinks(rules="https://r")),
            "lonewolf": LeagueConfig(channels=["lonewolf"]),
        })
        registry = ListenerRegistry()
        callback = AsyncMock()
        registry.hears([r"^rules$"], ["direct_mention"], callback, kind="league_command")
        engine = DispatchEngine(registry, leagues)

        await engine.dispatch(classified("rules", MessageCategory.DIRECT_MENTION, public_channel), say)

        league = callback.await_args.args[2]
        assert league.name == "team"
        assert league.links.rules == "https://r"

    @pytest.mark.asyncio
    async def test_unresolved_league_still_stops_scan(self, public_channel, say):
        registry = ListenerRegistry()
        league_callback, fallback = AsyncMock(), AsyncMock()
        registry.hears([r"^rules$"], ["ambient"], league_callback, kind="league_command")
        registry.hears([r"^rules$"], ["ambient"], fallback)
        engine = DispatchEngine(registry, LeagueDirectory())

        result = await engine.dispatch(classified("rules", MessageCategory.AMBIENT, public_channel), say)

        assert result is not None and result.kind == "league_command"
        league_callback.assert_not_awaited()
        fallback.assert_not_awaited()


class TestReplyDispatcher:
    """Tests for reply threading."""

    @pytest.mark.asyncio
    async def test_threads_under_timestamp(self, public_channel, send):
        message = classified("x", MessageCategory.AMBIENT, public_channel, ts="123.456")
        await ReplyDispatcher().reply(message, "hello", send)
        assert send.calls == [{"text": "hello", "thread_ts": "123.456"}]

    @pytest.mark.asyncio
    async def test_top_level_without_timestamp(self, public_channel, send):
        message = classified("x", MessageCategory.AMBIENT, public_channel, ts=None)
        await ReplyDispatcher().reply(message, "hello", send)
        assert send.calls == [{"text": "hello"}]

    @pytest.mark.asyncio
    async def test_threading_can_be_disabled(self, public_channel, send):
        message = classified("x", MessageCategory.AMBIENT, public_channel, ts="1.0")
        await ReplyDispatcher(thread_replies=False).reply(message, "hello", send)
        assert send.calls == [{"text": "hello"}]

    @pytest.mark.asyncio
    async def test_send_failure_is_swallowed(self, public_channel, failing_send):
        message = classified("x", MessageCategory.AMBIENT, public_channel)
        await ReplyDispatcher().reply(message, "hello", failing_send)
        assert len(failing_send.calls) == 1

    @pytest.mark.asyncio
    async def test_bind(self, public_channel, send):
        message = classified("x", MessageCategory.AMBIENT, public_channel, ts="9.9")
        say = ReplyDispatcher().bind(message, send)
        await say("one")
        await say("two")
        assert send.texts == ["one", "two"]
        assert all(call["thread_ts"] == "9.9" for call in send.calls)
