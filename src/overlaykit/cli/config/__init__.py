"""Configuration inspection commands."""
