"""
Listener definitions and registry for Chesster.

A listener maps message categories and text patterns to a callback.
Supports:
- Plain commands: callback(message, say)
- League commands: callback(message, say, league)
- Transform chains applied before the callback runs
"""

import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Iterator, Literal

from chesster.bus.events import CommandMessage, MessageCategory
from chesster.routing.leagues import League

# Call this to send a message back to where the command came from
SayFn = Callable[[str], Awaitable[Any]]

Transform = Callable[[CommandMessage], CommandMessage]
CommandCallback = Callable[[CommandMessage, SayFn], Awaitable[None] | None]
LeagueCommandCallback = Callable[[CommandMessage, SayFn, League], Awaitable[None] | None]

ListenerKind = Literal["command", "league_command"]
PatternLike = str | re.Pattern


class RegistryFrozenError(RuntimeError):
    """Raised when registering a listener after startup is complete."""


def compile_pattern(pattern: PatternLike) -> re.Pattern:
    """Compile a pattern; plain strings are case-insensitive."""
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, re.IGNORECASE)


@dataclass(frozen=True)
class ListenerDefinition:
    """Shared part of every listener variant."""
    patterns: tuple[re.Pattern, ...]
    categories: frozenset[MessageCategory]
    transforms: tuple[Transform, ...] = ()
    name: str = ""
    callback: Callable[..., Any] | None = None

    kind: ListenerKind = field(default="command", init=False)

    def __post_init__(self) -> None:
        if not self.patterns:
            raise ValueError("A listener needs at least one pattern")
        if not self.categories:
            raise ValueError("A listener needs at least one message category")
        if self.callback is None:
            raise ValueError("A listener needs a callback")

    def wants(self, category: MessageCategory) -> bool:
        """Check if this listener reacts to a message category."""
        return category in self.categories

    def match(self, text: str) -> re.Match | None:
        """Try each pattern in order and return the first match."""
        for pattern in self.patterns:
            found = pattern.search(text)
            if found:
                return found
        return None

    def apply_transforms(self, message: CommandMessage) -> CommandMessage:
        for transform in self.transforms:
            message = transform(message)
        return message

    @property
    def label(self) -> str:
        return self.name or self.patterns[0].pattern


@dataclass(frozen=True)
class CommandListener(ListenerDefinition):
    """Listener whose callback needs no league context."""
    callback: CommandCallback | None = None

    kind: ListenerKind = field(default="command", init=False)


@dataclass(frozen=True)
class LeagueCommandListener(ListenerDefinition):
    """Listener whose callback is run against a specific league."""
    callback: LeagueCommandCallback | None = None

    kind: ListenerKind = field(default="league_command", init=False)


class ListenerRegistry:
    """
    Ordered, append-only collection of listeners.

    Registration order is the only source of priority. Once frozen, the
    registry is read-only for the rest of the process.
    """

    def __init__(self):
        self._listeners: list[ListenerDefinition] = []
        self._frozen = False

    def add(self, listener: ListenerDefinition) -> ListenerDefinition:
        """Append a fully built listener."""
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{listener.label}': registry is frozen"
            )
        self._listeners.append(listener)
        return listener

    def hears(
        self,
        patterns: Iterable[PatternLike],
        categories: Iterable[MessageCategory | str],
        callback: Callable[..., Any],
        transforms: Iterable[Transform] = (),
        kind: ListenerKind = "command",
        name: str = "",
    ) -> ListenerDefinition:
        """
        Register a listener.

        Args:
            patterns: Regular expressions, tried in order.
            categories: Message categories the listener reacts to.
            callback: Called with (message, say) or (message, say, league).
            transforms: Functions applied to the message before the callback.
            kind: "command" or "league_command".
            name: Optional display name.

        Returns:
            The registered listener.
        """
        options = dict(
            patterns=tuple(compile_pattern(p) for p in patterns),
            categories=frozenset(MessageCategory(c) for c in categories),
            transforms=tuple(transforms),
            name=name,
            callback=callback,
        )
        if kind == "league_command":
            listener = LeagueCommandListener(**options)
        elif kind == "command":
            listener = CommandListener(**options)
        else:
            raise ValueError(f"Unknown listener kind: {kind}")
        return self.add(listener)

    def command(
        self,
        *patterns: PatternLike,
        categories: Iterable[MessageCategory | str],
        transforms: Iterable[Transform] = (),
        name: str = "",
    ) -> Callable[[CommandCallback], CommandCallback]:
        """Decorator form of `hears` for plain commands."""
        def decorator(func: CommandCallback) -> CommandCallback:
            self.hears(patterns, categories, func, transforms, "command", name or func.__name__)
            return func
        return decorator

    def league_command(
        self,
        *patterns: PatternLike,
        categories: Iterable[MessageCategory | str],
        transforms: Iterable[Transform] = (),
        name: str = "",
    ) -> Callable[[LeagueCommandCallback], LeagueCommandCallback]:
        """Decorator form of `hears` for league commands."""
        def decorator(func: LeagueCommandCallback) -> LeagueCommandCallback:
            self.hears(patterns, categories, func, transforms, "league_command", name or func.__name__)
            return func
        return decorator

    def freeze(self) -> None:
        """Stop accepting registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __iter__(self) -> Iterator[ListenerDefinition]:
        return iter(tuple(self._listeners))

    def __len__(self) -> int:
        return len(self._listeners)
