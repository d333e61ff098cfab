"""Core authorization and sync logic for pocketsync."""
