"""
Message routing for Chesster.

Classifies inbound messages into one of four categories:
- Direct mention: the bot is tagged in a channel
- Direct message: a 1:1 conversation with the bot
- Bot message: posted by another bot
- Ambient: anything else the bot can see
"""

from chesster.routing.classifier import (
    classify,
    mention_token,
    strip_mention,
)
from chesster.routing.leagues import League, LeagueDirectory

__all__ = [
    "classify",
    "mention_token",
    "strip_mention",
    "League",
    "LeagueDirectory",
]
