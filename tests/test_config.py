"""Tests for configuration loading and league lookup."""

import json

from chesster.bus.events import ChannelInfo
from chesster.config.loader import load_config, save_config
from chesster.config.schema import DEFAULT_APOLOGY, Config, LeagueConfig
from chesster.routing.leagues import LeagueDirectory


class TestConfigLoader:
    """Tests for the JSON config file."""

    def test_defaults_when_missing(self, config_dir):
        config = load_config(config_dir / "config.json")
        assert config.bot.apology_text == DEFAULT_APOLOGY
        assert config.bot.reply_in_thread is True
        assert config.database.dialect == "sqlite"
        assert config.database.connect_timeout == 10.0

    def test_round_trip(self, config_dir):
        path = config_dir / "config.json"
        config = Config(default_league="team", leagues={"team": LeagueConfig(channels=["C1"])})
        config.slack.bot_token = "xoxb-test"
        save_config(config, path)

        loaded = load_config(path)
        assert loaded.slack.bot_token == "xoxb-test"
        assert loaded.leagues["team"].channels == ["C1"]
        assert loaded.default_league == "team"

    def test_malformed_file_falls_back(self, config_dir):
        path = config_dir / "config.json"
        path.write_text("{not json")
        assert load_config(path).bot.source_url.endswith("Chesster")

    def test_invalid_values_fall_back(self, config_dir):
        path = config_dir / "config.json"
        path.write_text(json.dumps({"bot": {"reply_in_thread": "sometimes"}}))
        assert load_config(path).bot.reply_in_thread is True

    def test_environment_override(self, config_dir, monkeypatch):
        monkeypatch.setenv("CHESSTER_SLACK__APP_TOKEN", "xapp-env")
        config = load_config(config_dir / "config.json")
        assert config.slack.app_token == "xapp-env"

    def test_has_slack_tokens(self):
        config = Config()
        assert config.has_slack_tokens is False
        config.slack.bot_token = "xoxb"
        config.slack.app_token = "xapp"
        assert config.has_slack_tokens is True


class TestLeagueDirectory:
    """Tests for league resolution."""

    def directory(self, default=""):
        return LeagueDirectory(
            {
                "team": LeagueConfig(channels=["#team-general", "CTEAM"], aliases=["4545"]),
                "lonewolf": LeagueConfig(channels=["lonewolf-general"], aliases=["lw"]),
            },
            default,
        )

    def test_by_channel_name(self):
        league = self.directory().for_channel(ChannelInfo(id="C9", name="team-general"))
        assert league.name == "team"

    def test_by_channel_id(self):
        league = self.directory().for_channel(ChannelInfo(id="CTEAM"))
        assert league.name == "team"

    def test_default_league(self):
        league = self.directory("lonewolf").for_channel(ChannelInfo(id="C9", name="random"))
        assert league.name == "lonewolf"

    def test_no_match_without_default(self):
        assert self.directory().for_channel(ChannelInfo(id="C9", name="random")) is None

    def test_single_league_is_used(self):
        directory = LeagueDirectory({"team": LeagueConfig()})
        assert directory.for_channel(ChannelInfo(id="C9")).name == "team"

    def test_get_by_alias(self):
        assert self.directory().get("LW").name == "lonewolf"
        assert self.directory().get("unknown") is None

    def test_from_config(self):
        config = Config(leagues={"team": LeagueConfig()}, default_league="team")
        assert LeagueDirectory.from_config(config).names == ["team"]
