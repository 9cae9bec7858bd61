"""Payments module for KostKelola."""

from .models import Payment, PaymentStatus

__all__ = ["Payment", "PaymentStatus"]
