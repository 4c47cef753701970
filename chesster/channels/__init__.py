"""Chat platform integrations."""

from chesster.channels.resolver import ChannelResolver, StaticChannelResolver

__all__ = ["ChannelResolver", "StaticChannelResolver"]
