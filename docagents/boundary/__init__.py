"""Adapters to external systems: database, queue, cache, model providers."""
