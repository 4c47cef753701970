"""Subscription management commands (direct messages only)."""

from chesster.auto_reply.commands import ListenerRegistry, SayFn
from chesster.auto_reply.middleware import normalize_whitespace
from chesster.bus.events import CommandMessage, MessageCategory
from chesster.storage.store import ChessterStore

DM_ONLY = [MessageCategory.DIRECT_MESSAGE]


def format_subscriptions(subscriptions) -> str:
    if not subscriptions:
        return "You have no subscriptions."
    lines = ["Your subscriptions:"]
    for sub in subscriptions:
        lines.append(
            f"  {sub.id}) tell {sub.target} when {sub.event} for {sub.source} in {sub.league}"
        )
    return "\n".join(lines)


def register(registry: ListenerRegistry, store: ChessterStore) -> None:
    """Register subscription commands."""

    @registry.command(
        r"^subscriptions?\s+list$",
        categories=DM_ONLY,
        transforms=[normalize_whitespace],
    )
    async def subscription_list(message: CommandMessage, say: SayFn) -> None:
        subscriptions = await store.list_subscriptions(message.user)
        await say(format_subscriptions(subscriptions))

    @registry.command(
        r"^subscriptions?\s+remove\s+(\d+)$",
        categories=DM_ONLY,
        transforms=[normalize_whitespace],
    )
    async def subscription_remove(message: CommandMessage, say: SayFn) -> None:
        subscription_id = int(message.group(1))
        if await store.remove_subscription(subscription_id, message.user):
            await say(f"Subscription {subscription_id} removed.")
        else:
            await say(f"You have no subscription with id {subscription_id}.")
