"""Services Layer — fetchers and orchestrators the routes delegate to.

Invariants:
    - Services never build HTTP responses; they return schemas or raise DashboardError
    - All IO goes through the query executor (infrastructure/database.py)

Design Decisions:
    - data.py holds one fetcher per dataset; dashboard.py composes them
"""
