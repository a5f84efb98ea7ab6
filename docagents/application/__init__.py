"""Application layer: pipeline stage handlers and services."""
