"""
importhub/schemas/dashboard.py - Pydantic models for the import dashboard.
"""
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class StatusBreakdown(BaseModel):
    status: str
    count: int
    total_value: Decimal = Field(Decimal("0.00"), description="Sum of total_amount for the status")


class MonthlyTrend(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    imports_count: int
    total_value: Decimal = Decimal("0.00")


class TopSupplier(BaseModel):
    id: int
    name: str
    imports_count: int
    total_value: Decimal = Decimal("0.00")


class DashboardOut(BaseModel):
    status_breakdown: List[StatusBreakdown] = Field(default_factory=list)
    monthly_trends: List[MonthlyTrend] = Field(default_factory=list)
    top_suppliers: List[TopSupplier] = Field(default_factory=list)
