"""Channel metadata lookup over the Slack Web API."""

from loguru import logger
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from chesster.bus.events import ChannelInfo


class ChannelResolver:
    """
    Resolves channel IDs to channel metadata.

    Every call hits the API; results are not cached between events.
    Lookup failures return None instead of raising.
    """

    def __init__(self, client: AsyncWebClient):
        self.client = client

    async def resolve(self, channel_id: str) -> ChannelInfo | None:
        """
        Look up a channel.

        Args:
            channel_id: Slack channel ID.

        Returns:
            ChannelInfo, or None if the lookup failed.
        """
        try:
            result = await self.client.conversations_info(channel=channel_id)
        except SlackApiError as e:
            logger.error(f"Error getting channel {channel_id}: {e.response.get('error', e)}")
            return None
        except Exception as e:
            logger.error(f"Error getting channel {channel_id}: {e}")
            return None

        if not result.get("ok") or not result.get("channel"):
            return None
        return ChannelInfo.from_api(result["channel"])

    __call__ = resolve


class StaticChannelResolver:
    """In-memory resolver, used by the CLI test command."""

    def __init__(self, channels: dict[str, ChannelInfo] | None = None):
        self.channels = dict(channels or {})

    async def resolve(self, channel_id: str) -> ChannelInfo | None:
        return self.channels.get(channel_id)

    __call__ = resolve
