"""Overlay build commands."""
