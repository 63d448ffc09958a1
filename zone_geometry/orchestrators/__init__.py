"""Batch orchestration for the geometry pipeline.

- pipeline: per-entity feature building and batch processing
- worker: background thread-pool execution with per-channel supersession
"""
