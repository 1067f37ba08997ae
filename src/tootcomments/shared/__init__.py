"""Shared errors, logging helpers and constants."""
