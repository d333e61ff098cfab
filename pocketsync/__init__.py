"""pocketsync - archive your Pocket reading list into a local SQLite database."""

__version__ = "0.1.0"
