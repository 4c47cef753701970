"""
Slack channel integration for Chesster.

Uses Slack Bolt SDK in Socket Mode with support for:
- Channel messages the bot can see (ambient, DMs, bot messages)
- App mentions
- Workspace/channel allowlists
"""

from typing import Any

from loguru import logger
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from chesster.auto_reply.handler import EventHandler
from chesster.bus.events import EventKind, InboundEvent
from chesster.config.schema import SlackConfig

# Message subtypes that carry no command text
IGNORED_SUBTYPES = {
    "message_changed",
    "message_deleted",
    "message_replied",
    "channel_join",
    "channel_leave",
    "group_join",
    "group_leave",
}


class SlackChannel:
    """
    Slack channel implementation using Slack Bolt SDK.

    Configuration (via SlackConfig):
    - bot_token: Bot User OAuth Token (xoxb-...)
    - app_token: App-Level Token for Socket Mode (xapp-...)
    - signing_secret: Signing secret for request verification
    - allow_channels: List of allowed channel IDs (empty = all)
    - allow_users: List of allowed user IDs (empty = all)
    """

    name = "slack"

    def __init__(
        self,
        config: SlackConfig,
        handler: EventHandler,
        app: AsyncApp | None = None,
    ):
        """
        Initialize Slack channel.

        Args:
            config: Slack configuration.
            handler: Per-event handler that classifies and dispatches.
            app: Optional pre-built Bolt app.
        """
        self.config = config
        self.handler = handler
        self.app_token = config.app_token
        self.allow_channels = set(config.allow_channels or [])
        self.allow_users = set(config.allow_users or [])

        self.app = app or AsyncApp(
            token=config.bot_token,
            signing_secret=config.signing_secret or None,
        )

        self._handler: AsyncSocketModeHandler | None = None
        self._bot_user_id: str = ""
        self._running = False

        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Set up Slack event handlers."""

        # Everything posted where the bot is present, including DMs
        @self.app.event("message")
        async def handle_message(event, say, context):
            await self.on_event(event, say, context, EventKind.MESSAGE)

        # Messages that tag the bot directly (e.g. `@chesster source`)
        @self.app.event("app_mention")
        async def handle_mention(event, say, context):
            await self.on_event(event, say, context, EventKind.MENTION)

    def _is_allowed_channel(self, channel_id: str) -> bool:
        """Check if channel is allowed."""
        if not self.allow_channels:
            return True
        return channel_id in self.allow_channels

    def _is_allowed_user(self, user_id: str) -> bool:
        """Check if user is allowed."""
        if not self.allow_users:
            return True
        return user_id in self.allow_users

    async def on_event(
        self,
        payload: dict[str, Any],
        say,
        context,
        kind: EventKind,
    ) -> None:
        """Turn a Slack payload into an inbound event and handle it."""
        if payload.get("subtype") in IGNORED_SUBTYPES:
            return

        event = InboundEvent.from_payload(payload, kind)
        bot_user_id = (context.get("bot_user_id") if context else None) or self._bot_user_id

        # Never react to our own messages
        if event.user and event.user == bot_user_id:
            return

        if not self._is_allowed_channel(event.channel_id):
            return
        if event.user and not self._is_allowed_user(event.user):
            return

        try:
            await self.handler.handle(event, say, bot_user_id)
        except Exception as e:
            logger.error(f"Error handling {kind.value}: {e}")

    async def start(self) -> None:
        """Start the Slack channel."""
        logger.info("Starting Slack channel")
        self._running = True

        # Get bot user ID
        try:
            auth_response = await self.app.client.auth_test()
            self._bot_user_id = auth_response.get("user_id", "")
            logger.info(f"Slack bot authenticated as {auth_response.get('user', 'unknown')}")
        except Exception as e:
            logger.error(f"Failed to authenticate Slack bot: {e}")
            self._running = False
            return

        # Start Socket Mode handler
        self._handler = AsyncSocketModeHandler(self.app, self.app_token)

        try:
            await self._handler.start_async()
        except Exception as e:
            logger.error(f"Slack channel error: {e}")
            self._running = False

    async def stop(self) -> None:
        """Stop the Slack channel."""
        logger.info("Stopping Slack channel")
        self._running = False

        if self._handler:
            await self._handler.close_async()
            self._handler = None

    @property
    def is_running(self) -> bool:
        """Check if the channel is running."""
        return self._running
