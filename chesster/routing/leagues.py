"""
League lookup for league-scoped commands.

A league command needs to know which league it is about. The league is
found from the channel the message came from:
1. A league listing the channel's ID or name
2. The configured default league
3. The only league, when exactly one is configured
"""

from dataclasses import dataclass, field

from chesster.bus.events import ChannelInfo
from chesster.config.schema import Config, LeagueConfig, LeagueLinks


@dataclass(frozen=True)
class League:
    """A league as seen by command callbacks."""
    name: str
    links: LeagueLinks = field(default_factory=LeagueLinks)
    aliases: tuple[str, ...] = ()


class LeagueDirectory:
    """Read-only lookup of configured leagues."""

    def __init__(
        self,
        leagues: dict[str, LeagueConfig] | None = None,
        default_league: str = "",
    ):
        self._leagues = dict(leagues or {})
        self._default = default_league
        self._by_channel: dict[str, str] = {}
        for name, league in self._leagues.items():
            for channel in league.channels:
                self._by_channel[channel.lstrip("#").lower()] = name

    @classmethod
    def from_config(cls, config: Config) -> "LeagueDirectory":
        return cls(config.leagues, config.default_league)

    @property
    def names(self) -> list[str]:
        return list(self._leagues)

    def get(self, name: str) -> League | None:
        """Get a league by name or alias."""
        wanted = name.lower()
        for league_name, league in self._leagues.items():
            if league_name.lower() == wanted or wanted in (a.lower() for a in league.aliases):
                return self._build(league_name)
        return None

    def for_channel(self, channel: ChannelInfo) -> League | None:
        """Resolve the league a channel belongs to."""
        for key in (channel.id, channel.name):
            if key and key.lower() in self._by_channel:
                return self._build(self._by_channel[key.lower()])

        if self._default and self._default in self._leagues:
            return self._build(self._default)

        if len(self._leagues) == 1:
            return self._build(next(iter(self._leagues)))

        return None

    def _build(self, name: str) -> League:
        league = self._leagues[name]
        return League(name=name, links=league.links, aliases=tuple(league.aliases))
