"""
Document ingestion and retrieval-augmented question answering.

Packages:
    configs: pydantic-settings configuration
    core: chunking, lifecycle rules, backoff and scoring
    models: pydantic domain records
    boundary: store, queue, cache, model and extraction adapters
    application: pipeline stages and services
    api: FastAPI surface
    workers: stage worker processes
"""

__version__ = "0.1.0"
