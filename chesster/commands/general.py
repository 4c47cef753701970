"""Commands that need no league or storage."""

from chesster.auto_reply.commands import ListenerRegistry, SayFn
from chesster.bus.events import CommandMessage, MessageCategory

ADDRESSED = (MessageCategory.DIRECT_MENTION, MessageCategory.DIRECT_MESSAGE)

COMMANDS_TEXT = (
    "I will respond to the following commands:\n```"
    "    [ starter guide ]              ! get the starter guide link\n"
    "    [ rules | regulations ]        ! get the rules and regulations\n"
    "    [ pairings ]                   ! get pairings link\n"
    "    [ standings ]                  ! get standings link\n"
    "    [ commands | command list ]    ! this list\n"
    "    [ rating <player> ]            ! get the player's classical rating\n"
    "    [ subscription list ]          ! list your subscriptions (DM only)\n"
    "    [ subscription remove <id> ]   ! remove a subscription (DM only)\n"
    "    [ source ]                     ! github repo for Chesster\n"
    "```"
)


def register(registry: ListenerRegistry, source_url: str) -> None:
    """Register general commands."""

    @registry.command(r"^source$", categories=ADDRESSED)
    async def source(message: CommandMessage, say: SayFn) -> None:
        await say(f"The source code for Chesster can be found at: {source_url}")

    @registry.command(r"^commands$", r"^command list$", r"^help$", categories=ADDRESSED)
    async def commands(message: CommandMessage, say: SayFn) -> None:
        await say(COMMANDS_TEXT)

    @registry.command(r"^ping channel$", categories=[MessageCategory.DIRECT_MENTION])
    async def ping_channel(message: CommandMessage, say: SayFn) -> None:
        await say("<!channel>")
