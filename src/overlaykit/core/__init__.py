"""Core overlaykit library: overlay pipeline, backend resolution, config."""
