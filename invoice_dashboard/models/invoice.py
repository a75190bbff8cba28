"""Invoice ORM — one billed amount for one customer.

Invariants:
    - amount is stored in integer cents, converted only at display time
    - status is one of InvoiceStatus ('paid' | 'pending'), enforced only by String length
    - Always belongs to a Customer (customer_id FK)
"""

import datetime
import uuid

from sqlalchemy import String, Integer, Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoice_dashboard.db.base import Base


class Invoice(Base):
    """Invoice entity."""
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    customer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customers.id"), nullable=False, index=True,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="invoices",
    )
