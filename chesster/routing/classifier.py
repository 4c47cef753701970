"""
Message classifier for listener dispatch.

Decides which category an inbound event belongs to and produces the text
that listener patterns are matched against. Categories are checked in a
fixed order:
1. Bot message (another bot posted it)
2. Direct message (1:1 channel with the bot)
3. Direct mention (the bot is tagged)
4. Ambient (everything else)
"""

import re

from chesster.bus.events import (
    ChannelInfo,
    ClassifiedMessage,
    EventKind,
    InboundEvent,
    MessageCategory,
)

BOT_MESSAGE_SUBTYPE = "bot_message"


def mention_token(bot_user_id: str) -> str:
    """Slack markup for a mention of the given user."""
    return f"<@{bot_user_id}>"


def _mention_pattern(bot_user_id: str) -> re.Pattern:
    # Token plus an optional ':' or ',' and the whitespace after it
    return re.compile(re.escape(mention_token(bot_user_id)) + r"[:,]?\s*")


def is_bot_message(event: InboundEvent) -> bool:
    """Check if the event was posted by a bot."""
    return event.subtype == BOT_MESSAGE_SUBTYPE or bool(event.bot_id)


def is_direct_message(event: InboundEvent, channel: ChannelInfo) -> bool:
    """Check if the event came through a 1:1 channel with a human."""
    return channel.is_im and not channel.is_group and not is_bot_message(event)


def is_direct_mention(event: InboundEvent, bot_user_id: str) -> bool:
    """Check if the event tags the bot."""
    if is_bot_message(event):
        return False
    if event.kind == EventKind.MENTION:
        return True
    return bool(bot_user_id) and mention_token(bot_user_id) in (event.text or "")


def strip_mention(text: str, bot_user_id: str) -> str:
    """Remove the first bot mention (and a trailing separator) from text."""
    if not bot_user_id:
        return text
    return _mention_pattern(bot_user_id).sub("", text, count=1)


def classify(
    event: InboundEvent,
    channel: ChannelInfo,
    bot_user_id: str,
) -> ClassifiedMessage:
    """
    Classify an inbound event.

    Args:
        event: The raw event.
        channel: Metadata for the event's channel.
        bot_user_id: The bot's own user ID.

    Returns:
        ClassifiedMessage with exactly one category.
    """
    text = event.text or ""
    mentioned = is_direct_mention(event, bot_user_id)

    if is_bot_message(event):
        category = MessageCategory.BOT_MESSAGE
    elif is_direct_message(event, channel):
        category = MessageCategory.DIRECT_MESSAGE
    elif mentioned:
        category = MessageCategory.DIRECT_MENTION
    else:
        category = MessageCategory.AMBIENT

    if mentioned:
        text = strip_mention(text, bot_user_id)

    return ClassifiedMessage(
        category=category,
        text=text,
        user=event.user or "",
        channel=channel,
        ts=event.ts,
        kind=event.kind,
    )
