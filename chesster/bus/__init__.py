"""Event types shared by the transport, classifier and dispatcher."""

from chesster.bus.events import (
    ChannelInfo,
    ClassifiedMessage,
    CommandMessage,
    EventKind,
    InboundEvent,
    MessageCategory,
)

__all__ = [
    "ChannelInfo",
    "ClassifiedMessage",
    "CommandMessage",
    "EventKind",
    "InboundEvent",
    "MessageCategory",
]
