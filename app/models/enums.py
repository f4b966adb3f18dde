"""Centralized Enum Definitions"""

import enum


class BillStatus(str, enum.Enum):
    """
    Bill payment status.

    PENDING, PARTIALLY_PAID and PAID are derived from the balance;
    CLOSED is a manual override that blocks further payment activity.
    """
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    CLOSED = "closed"
