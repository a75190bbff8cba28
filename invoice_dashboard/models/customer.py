"""Customer ORM — people and companies invoices are billed to.

Invariants:
    - id is a UUID string primary key (client-side default)
    - name and email are non-nullable; email uniqueness is left to the store

Design Decisions:
    - String(36) over dialect UUID: the same model runs on PostgreSQL and SQLite tests
"""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoice_dashboard.db.base import Base


class Customer(Base):
    """Customer entity — joined with invoices for aggregate views."""
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(String(255), nullable=False)

    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice", back_populates="customer",
    )
