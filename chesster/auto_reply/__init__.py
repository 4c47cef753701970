"""
Command dispatch for Chesster.

Provides:
- Listener registration (plain and league commands)
- First-match-wins dispatch in registration order
- Threaded replies
- Per-event error containment
"""

from chesster.auto_reply.commands import (
    CommandListener,
    LeagueCommandListener,
    ListenerDefinition,
    ListenerRegistry,
    RegistryFrozenError,
    SayFn,
)
from chesster.auto_reply.dispatch import (
    DispatchEngine,
    ReplyDispatcher,
)
from chesster.auto_reply.handler import EventHandler
from chesster.auto_reply.middleware import (
    normalize_whitespace,
    strip_link_markup,
)

__all__ = [
    # Listeners
    "CommandListener",
    "LeagueCommandListener",
    "ListenerDefinition",
    "ListenerRegistry",
    "RegistryFrozenError",
    "SayFn",
    # Dispatch
    "DispatchEngine",
    "ReplyDispatcher",
    "EventHandler",
    # Transforms
    "normalize_whitespace",
    "strip_link_markup",
]
