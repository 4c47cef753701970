"""Event types for message classification and dispatch."""

from dataclasses import dataclass, field
from enum import Enum


class MessageCategory(str, Enum):
    """How a message reached the bot."""
    DIRECT_MENTION = "direct_mention"
    DIRECT_MESSAGE = "direct_message"
    BOT_MESSAGE = "bot_message"
    AMBIENT = "ambient"


class EventKind(str, Enum):
    """Which platform event delivered the message."""
    MESSAGE = "message"  # Any message in a channel the bot can see
    MENTION = "app_mention"  # Platform already decided the bot was tagged


@dataclass(frozen=True)
class ChannelInfo:
    """Snapshot of channel metadata, fetched once per event."""
    id: str
    name: str | None = None
    is_im: bool = False
    is_group: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "ChannelInfo":
        """Build from a `conversations.info` channel payload."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name"),
            is_im=bool(data.get("is_im", False)),
            is_group=bool(data.get("is_group", False)),
        )


@dataclass(frozen=True)
class InboundEvent:
    """Raw message event as delivered by the platform."""
    kind: EventKind
    channel_id: str
    text: str = ""
    user: str = ""
    ts: str | None = None
    subtype: str | None = None
    bot_id: str | None = None  # Set when another bot posted the message

    @classmethod
    def from_payload(cls, payload: dict, kind: EventKind) -> "InboundEvent":
        """
        Build from a Slack event payload.

        Missing optional fields are defaulted rather than rejected.
        """
        return cls(
            kind=kind,
            channel_id=payload.get("channel", ""),
            text=payload.get("text") or "",
            user=payload.get("user") or "",
            ts=payload.get("ts"),
            subtype=payload.get("subtype"),
            bot_id=payload.get("bot_id"),
        )


@dataclass(frozen=True)
class ClassifiedMessage:
    """An event after classification; lives for one dispatch pass."""
    category: MessageCategory
    text: str  # Text used for pattern matching (mention stripped)
    user: str
    channel: ChannelInfo
    ts: str | None = None
    kind: EventKind = EventKind.MESSAGE


@dataclass(frozen=True)
class CommandMessage:
    """Message handed to a listener callback."""
    user: str
    channel: ChannelInfo
    text: str
    ts: str | None = None
    category: MessageCategory = MessageCategory.AMBIENT
    matches: tuple[str | None, ...] = field(default_factory=tuple)

    @property
    def match(self) -> str:
        """The full text matched by the pattern."""
        return self.matches[0] if self.matches and self.matches[0] else ""

    def group(self, index: int, default: str = "") -> str:
        """Get a capture group, or `default` when absent."""
        if 0 <= index < len(self.matches) and self.matches[index] is not None:
            return self.matches[index]
        return default
