"""Route Modules — one file per dataset family.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain query logic (delegate to services)
"""
