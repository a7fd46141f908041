"""Bountyboard winner assignment and prize distribution service."""

__version__ = "0.1.0"
