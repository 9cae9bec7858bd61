"""Report schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class RevenueStats(BaseModel):
    total_revenue: Decimal
    monthly_revenue: Decimal
    yearly_revenue: Decimal
    pending_payments: Decimal
    overdue_payments: Decimal


class OccupancyStats(BaseModel):
    total_rooms: int
    occupied_rooms: int
    occupancy_rate: int
    total_tenants: int


class DetailedStats(BaseModel):
    avg_room_price: Decimal
    payment_collection_rate: float
    avg_tenant_stay: int
    tenant_turnover_rate: int
    maintenance_requests_open: int
    maintenance_requests_total: int
    maintenance_costs: Decimal


class PropertyReport(BaseModel):
    """Statistics of one property; ``details`` is only filled on higher tiers."""

    property_id: int
    tier: str
    revenue: RevenueStats
    occupancy: OccupancyStats
    details: DetailedStats | None = None


class MonthlyStats(BaseModel):
    month: date
    label: str
    revenue: Decimal
    pending: Decimal
    overdue: Decimal
    occupancy_rate: int
