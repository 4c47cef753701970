"""
Chesster - Slack command bot for the Lichess4545 leagues.
"""

__version__ = "0.1.0"
__logo__ = "♞"
