"""Maintenance request module for KostKelola."""

from .models import MaintenancePriority, MaintenanceRequest, MaintenanceStatus

__all__ = ["MaintenancePriority", "MaintenanceRequest", "MaintenanceStatus"]
