"""Local link storage for pocketsync."""
