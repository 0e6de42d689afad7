"""Persistent task and ticket record store."""
