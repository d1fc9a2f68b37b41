"""Newsdesk: comment moderation and abuse reporting for a community news site."""

__version__ = "0.1.0"
