"""
Per-event handling for Chesster.

Every inbound event goes through resolve -> classify -> dispatch. Nothing
raised while handling one event is allowed to escape; a failing callback
gets an apology reply instead.
"""

from typing import Awaitable, Callable

from loguru import logger

from chesster.auto_reply.dispatch import DispatchEngine, ReplyDispatcher, SendFn
from chesster.bus.events import (
    ChannelInfo,
    ClassifiedMessage,
    EventKind,
    InboundEvent,
)
from chesster.config.schema import DEFAULT_APOLOGY
from chesster.routing.classifier import classify, mention_token

ChannelLookup = Callable[[str], Awaitable[ChannelInfo | None]]


class EventHandler:
    """Runs one inbound event to completion."""

    def __init__(
        self,
        engine: DispatchEngine,
        resolve_channel: ChannelLookup,
        replies: ReplyDispatcher | None = None,
        apology_text: str = DEFAULT_APOLOGY,
    ):
        self.engine = engine
        self.resolve_channel = resolve_channel
        self.replies = replies or ReplyDispatcher()
        self.apology_text = apology_text

        # Stats
        self._handled_count = 0
        self._error_count = 0

    async def handle(
        self,
        event: InboundEvent,
        send: SendFn,
        bot_user_id: str,
    ) -> ClassifiedMessage | None:
        """
        Handle a single inbound event.

        Args:
            event: The raw event.
            send: Platform send primitive for the event's channel.
            bot_user_id: The bot's own user ID.

        Returns:
            The classified message, or None if the event was dropped.
        """
        self._handled_count += 1

        channel = await self.resolve_channel(event.channel_id)
        if channel is None:
            logger.warning(f"Unable to get details for channel: {event.channel_id}")
            return None

        classified = classify(event, channel, bot_user_id)

        # Channel messages tagging the bot also arrive as app_mention events
        if (
            event.kind == EventKind.MESSAGE
            and not channel.is_im
            and mention_token(bot_user_id) in (event.text or "")
        ):
            logger.debug(f"Leaving mention in {channel.id} to the app_mention handler")
            return None

        say = self.replies.bind(classified, send)
        try:
            await self.engine.dispatch(classified, say)
        except Exception:
            self._error_count += 1
            logger.exception(f"Error handling {event.kind.value} in {channel.id}")
            await self.replies.reply(classified, self.apology_text, send)

        return classified

    def get_stats(self) -> dict[str, int]:
        """Get handler statistics."""
        return {
            "handled_count": self._handled_count,
            "error_count": self._error_count,
        }
