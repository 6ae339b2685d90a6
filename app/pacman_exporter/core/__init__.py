"""Core process helpers: paths and logging."""
