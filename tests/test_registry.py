"""Tests for listener registration."""

import re

import pytest

from chesster.auto_reply.commands import (
    CommandListener,
    LeagueCommandListener,
    ListenerRegistry,
    RegistryFrozenError,
)
from chesster.bus.events import MessageCategory


async def noop(message, say):
    pass


class TestListenerDefinition:
    """Tests for listener invariants and matching."""

    def test_requires_patterns(self):
        with pytest.raises(ValueError):
            CommandListener(patterns=(), categories=frozenset({MessageCategory.AMBIENT}), callback=noop)

    def test_requires_categories(self):
        with pytest.raises(ValueError):
            CommandListener(patterns=(re.compile("x"),), categories=frozenset(), callback=noop)

    def test_requires_callback(self):
        with pytest.raises(ValueError):
            CommandListener(
                patterns=(re.compile("x"),),
                categories=frozenset({MessageCategory.AMBIENT}),
            )

    def test_patterns_tried_in_order(self):
        listener = CommandListener(
            patterns=(re.compile(r"^(help)$"), re.compile(r"^(h)elp$")),
            categories=frozenset({MessageCategory.AMBIENT}),
            callback=noop,
        )
        assert listener.match("help").re.pattern == r"^(help)$"

    def test_kind_tags(self):
        registry = ListenerRegistry()
        plain = registry.hears(["a"], ["ambient"], noop)
        league = registry.hears(["b"], ["ambient"], noop, kind="league_command")
        assert isinstance(plain, CommandListener) and plain.kind == "command"
        assert isinstance(league, LeagueCommandListener) and league.kind == "league_command"


class TestListenerRegistry:
    """Tests for the registry."""

    def test_preserves_registration_order(self):
        registry = ListenerRegistry()
        registry.hears(["first"], ["ambient"], noop, name="first")
        registry.hears(["second"], ["ambient"], noop, name="second")
        assert [listener.label for listener in registry] == ["first", "second"]
        assert len(registry) == 2

    def test_string_patterns_are_case_insensitive(self):
        registry = ListenerRegistry()
        listener = registry.hears([r"^source$"], ["direct_message"], noop)
        assert listener.match("SOURCE") is not None

    def test_compiled_patterns_used_as_given(self):
        registry = ListenerRegistry()
        listener = registry.hears([re.compile(r"^source$")], ["direct_message"], noop)
        assert listener.match("SOURCE") is None

    def test_unknown_category_rejected(self):
        registry = ListenerRegistry()
        with pytest.raises(ValueError):
            registry.hears(["x"], ["shouting"], noop)

    def test_unknown_kind_rejected(self):
        registry = ListenerRegistry()
        with pytest.raises(ValueError):
            registry.hears(["x"], ["ambient"], noop, kind="other")

    def test_frozen_registry_rejects_listeners(self):
        registry = ListenerRegistry()
        registry.hears(["x"], ["ambient"], noop)
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.hears(["y"], ["ambient"], noop)
        assert len(registry) == 1

    def test_decorators_register_and_return_function(self):
        registry = ListenerRegistry()

        @registry.command(r"^help$", categories=[MessageCategory.DIRECT_MESSAGE])
        async def help_command(message, say):
            pass

        @registry.league_command(r"^standings$", categories=[MessageCategory.DIRECT_MESSAGE])
        async def standings(message, say, league):
            pass

        first, second = list(registry)
        assert first.callback is help_command
        assert first.label == "help_command"
        assert second.kind == "league_command"
