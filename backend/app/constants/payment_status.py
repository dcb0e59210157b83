"""Payment status values shared by room and class reservations."""

from __future__ import annotations

from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


# Payment states a cancellation moves a reservation into
REFUND_ON_CANCEL = {
    PaymentStatus.PENDING.value: PaymentStatus.PENDING.value,
    PaymentStatus.PAID.value: PaymentStatus.REFUNDED.value,
    PaymentStatus.REFUNDED.value: PaymentStatus.REFUNDED.value,
}


def payment_status_after_cancel(current: str | None) -> str:
    """Return the payment status a reservation carries once cancelled."""
    if not current:
        return PaymentStatus.PENDING.value
    return REFUND_ON_CANCEL.get(current, current)
