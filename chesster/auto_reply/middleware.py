"""Stock transforms applied to a matched message before its callback runs."""

import re
from dataclasses import replace

from chesster.bus.events import CommandMessage

_WHITESPACE = re.compile(r"\s+")
# <https://lichess.org/@/foo|lichess.org/@/foo> or <mailto:a@b.c>
_LINK_MARKUP = re.compile(r"<([^<>|]+)(?:\|([^<>]*))?>")


def normalize_whitespace(message: CommandMessage) -> CommandMessage:
    """Collapse runs of whitespace in the message text."""
    return replace(message, text=_WHITESPACE.sub(" ", message.text).strip())


def _unlink(value: str) -> str:
    def label(found: re.Match) -> str:
        target, text = found.group(1), found.group(2)
        if target.startswith(("@", "#", "!")):
            return found.group(0)  # user, channel and special mentions stay
        return text or target

    return _LINK_MARKUP.sub(label, value)


def strip_link_markup(message: CommandMessage) -> CommandMessage:
    """Replace Slack link markup with the visible label in text and matches."""
    matches = tuple(_unlink(m) if m is not None else None for m in message.matches)
    return replace(message, text=_unlink(message.text), matches=matches)
