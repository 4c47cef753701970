"""CLI module for Chesster."""
