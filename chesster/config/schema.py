"""Configuration schema using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_APOLOGY = "Error handling message. Its probably MrScribbles' fault. :sexy-glbert:"


class SlackConfig(BaseModel):
    """Slack connection configuration."""
    bot_token: str = ""  # Bot User OAuth Token (xoxb-...)
    app_token: str = ""  # App-Level Token for Socket Mode (xapp-...)
    signing_secret: str = ""  # Signing secret for verification
    allow_channels: list[str] = Field(default_factory=list)  # Allowed channel IDs
    allow_users: list[str] = Field(default_factory=list)  # Allowed user IDs


class BotConfig(BaseModel):
    """Reply behaviour."""
    apology_text: str = DEFAULT_APOLOGY
    reply_in_thread: bool = True
    source_url: str = "https://github.com/Lichess4545/Chesster"


class DatabaseConfig(BaseModel):
    """Persistent store configuration."""
    dialect: str = "sqlite"
    path: str = "~/.chesster/chesster.db"
    connect_timeout: float = 10.0  # Seconds

    @property
    def db_path(self) -> Path:
        """Get expanded database path."""
        return Path(self.path).expanduser()


class LeagueLinks(BaseModel):
    """Links a league publishes."""
    starter_guide: str = ""
    rules: str = ""
    pairings: str = ""
    standings: str = ""


class LeagueConfig(BaseModel):
    """A single league."""
    channels: list[str] = Field(default_factory=list)  # Channel IDs or names
    aliases: list[str] = Field(default_factory=list)
    links: LeagueLinks = Field(default_factory=LeagueLinks)


class Config(BaseSettings):
    """Root configuration for Chesster."""
    model_config = SettingsConfigDict(
        env_prefix="CHESSTER_",
        env_nested_delimiter="__",
    )

    slack: SlackConfig = Field(default_factory=SlackConfig)
    bot: BotConfig = Field(default_factory=BotConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    leagues: dict[str, LeagueConfig] = Field(default_factory=dict)
    default_league: str = ""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def has_slack_tokens(self) -> bool:
        """Check that both tokens needed for Socket Mode are present."""
        return bool(self.slack.bot_token and self.slack.app_token)
