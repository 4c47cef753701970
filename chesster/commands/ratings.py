"""Rating lookup backed by the store."""

from chesster.auto_reply.commands import ListenerRegistry, SayFn
from chesster.auto_reply.middleware import normalize_whitespace, strip_link_markup
from chesster.bus.events import CommandMessage
from chesster.commands.general import ADDRESSED
from chesster.storage.store import ChessterStore


def register(registry: ListenerRegistry, store: ChessterStore) -> None:
    """Register the rating command."""

    @registry.command(
        r"^rating\s+(\S+)$",
        categories=ADDRESSED,
        transforms=[strip_link_markup, normalize_whitespace],
    )
    async def rating(message: CommandMessage, say: SayFn) -> None:
        username = message.group(1).lstrip("@")
        found = await store.get_rating(username)
        if found is None or found.rating is None:
            await say(f"I don't have a classical rating for {username}.")
            return
        await say(f"{found.lichess_username} is rated {found.rating} in classical.")
