"""Tenant management module for KostKelola."""

from .models import Tenant, TenantStatus

__all__ = ["Tenant", "TenantStatus"]
