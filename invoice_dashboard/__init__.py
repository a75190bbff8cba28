"""Invoice Dashboard Package — data service behind the invoice dashboard front end.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
