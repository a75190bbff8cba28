"""ORM Models — SQLAlchemy declarative models for the dashboard's tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Invoice references Customer via customer_id; no other relationships

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from invoice_dashboard.models.customer import Customer  # noqa: F401
from invoice_dashboard.models.invoice import Invoice  # noqa: F401
from invoice_dashboard.models.revenue import Revenue  # noqa: F401
