"""Infrastructure Layer — store access, caching and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Store exceptions are mapped to DatabaseError before leaving this layer

Design Decisions:
    - Thin wrappers over SQLAlchemy and asyncio primitives, no retry or timeout policy
"""
