"""
Listener dispatch for Chesster.

Flow:
1. Walk listeners in registration order
2. Skip listeners that do not want the message's category
3. Try each pattern of a wanted listener against the message text
4. On the first match, build the command message, apply transforms and
   invoke the callback, then stop
"""

import inspect
from typing import Any, Awaitable, Callable

from loguru import logger

from chesster.auto_reply.commands import (
    LeagueCommandListener,
    ListenerDefinition,
    ListenerRegistry,
    SayFn,
)
from chesster.bus.events import ClassifiedMessage, CommandMessage
from chesster.routing.leagues import LeagueDirectory

# Platform send primitive: send(text) or send(text=..., thread_ts=...)
SendFn = Callable[..., Awaitable[Any]]


class ReplyDispatcher:
    """
    Sends replies through the platform's send primitive.

    Replies are threaded under the originating message when it carries a
    timestamp, otherwise posted as a top-level message. Send failures are
    logged and never reach the caller.
    """

    def __init__(self, thread_replies: bool = True):
        self.thread_replies = thread_replies

    async def reply(
        self,
        message: ClassifiedMessage | CommandMessage,
        text: str,
        send: SendFn,
    ) -> None:
        """Send `text` in reply to `message`."""
        try:
            if self.thread_replies and message.ts:
                await send(text=text, thread_ts=message.ts)
            else:
                await send(text)
        except Exception as e:
            logger.error(f"Failed to send reply in {message.channel.id}: {e}")

    def bind(self, message: ClassifiedMessage | CommandMessage, send: SendFn) -> SayFn:
        """Build a say() function for a single message."""
        async def say(text: str) -> None:
            await self.reply(message, text, send)
        return say


async def _call(callback: Callable[..., Any], *args: Any) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class DispatchEngine:
    """
    Picks and runs at most one listener per message.

    Holds no state between messages; the registry is frozen on
    construction and only read afterwards.
    """

    def __init__(
        self,
        registry: ListenerRegistry,
        leagues: LeagueDirectory | None = None,
    ):
        registry.freeze()
        self.registry = registry
        self.leagues = leagues or LeagueDirectory()

    @staticmethod
    def build_message(classified: ClassifiedMessage, found) -> CommandMessage:
        """Build the callback's message from a classified message and a match."""
        return CommandMessage(
            user=classified.user,
            channel=classified.channel,
            text=classified.text.strip(),
            ts=classified.ts,
            category=classified.category,
            matches=(found.group(0), *found.groups()),
        )

    def find(self, classified: ClassifiedMessage) -> tuple[ListenerDefinition, CommandMessage] | None:
        """
        Find the first listener that wants and matches the message.

        Returns:
            The listener and its transformed command message, or None.
        """
        for listener in self.registry:
            if not listener.wants(classified.category):
                continue
            found = listener.match(classified.text)
            if found is None:
                continue
            message = self.build_message(classified, found)
            return listener, listener.apply_transforms(message)
        return None

    async def dispatch(
        self,
        classified: ClassifiedMessage,
        say: SayFn,
    ) -> ListenerDefinition | None:
        """
        Dispatch a classified message.

        Callback exceptions propagate to the caller.

        Args:
            classified: The message to dispatch.
            say: Reply function handed to the callback.

        Returns:
            The listener that matched, or None when nothing matched.
        """
        result = self.find(classified)
        if result is None:
            logger.debug(
                f"No listener for {classified.category.value} message in {classified.channel.id}"
            )
            return None

        listener, message = result
        logger.debug(f"Dispatching '{listener.label}' for {message.user} in {message.channel.id}")

        if isinstance(listener, LeagueCommandListener):
            league = self.leagues.for_channel(message.channel)
            if league is None:
                logger.warning(
                    f"No league for channel {message.channel.id}; skipping '{listener.label}'"
                )
                return listener
            if listener.callback:
                await _call(listener.callback, message, say, league)
        elif listener.callback:
            await _call(listener.callback, message, say)

        return listener
