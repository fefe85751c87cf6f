"""Shared utilities (I/O, merging, subprocess, logging)."""
