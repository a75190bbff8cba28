"""Pydantic Schemas — the read shapes fetchers return and routes serialize.

Invariants:
    - Schemas describe what renderers consume, not how rows are stored
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
