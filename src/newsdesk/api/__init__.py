"""HTTP API for Newsdesk."""
