"""Adapters connecting the core to storage and web frameworks."""
