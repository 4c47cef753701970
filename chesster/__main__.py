"""Entry point for running Chesster as a module."""

from chesster.cli.commands import app

if __name__ == "__main__":
    app()
