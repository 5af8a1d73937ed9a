"""Namespaced key-value stores and cache keys."""
