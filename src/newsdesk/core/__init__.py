"""Core configuration for Newsdesk."""
