"""League link commands."""

from chesster.auto_reply.commands import ListenerRegistry, SayFn
from chesster.bus.events import CommandMessage
from chesster.commands.general import ADDRESSED
from chesster.routing.leagues import League

LINK_TITLES = {
    "starter_guide": "starter guide",
    "rules": "rules and regulations",
    "pairings": "pairings",
    "standings": "standings",
}


def link_reply(league: League, link: str) -> str:
    """Text for a league link, or a notice when the league has none."""
    title = LINK_TITLES[link]
    url = getattr(league.links, link, "")
    if not url:
        return f"The {league.name} league does not have a {title} link configured."
    return f"Here is the {title} for the {league.name} league: {url}"


def _link_command(registry: ListenerRegistry, link: str, *patterns: str) -> None:
    async def callback(message: CommandMessage, say: SayFn, league: League) -> None:
        await say(link_reply(league, link))

    registry.hears(patterns, ADDRESSED, callback, kind="league_command", name=link)


def register(registry: ListenerRegistry) -> None:
    """Register league link commands."""
    _link_command(registry, "starter_guide", r"^starter guide$")
    _link_command(registry, "rules", r"^rules$", r"^regulations$")
    _link_command(registry, "pairings", r"^pairings$")
    _link_command(registry, "standings", r"^standings$")
