"""Shared helpers: logging, file I/O and validation."""
