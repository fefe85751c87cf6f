"""Backend selection commands."""
