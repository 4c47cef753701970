"""Built-in Chesster commands."""

from chesster.auto_reply.commands import ListenerRegistry
from chesster.commands import general, league, ratings, subscriptions
from chesster.config.schema import Config
from chesster.storage.store import ChessterStore


def register_default_commands(
    registry: ListenerRegistry,
    config: Config,
    store: ChessterStore | None = None,
) -> ListenerRegistry:
    """
    Register built-in listeners in priority order.

    Store-backed commands are only registered when a store is given.
    """
    general.register(registry, config.bot.source_url)
    league.register(registry)
    if store is not None:
        ratings.register(registry, store)
        subscriptions.register(registry, store)
    return registry


__all__ = ["register_default_commands"]
