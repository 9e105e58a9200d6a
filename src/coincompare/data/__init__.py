"""Shared data access."""
