"""
# `importhub/services/dashboard_service.py` — Import dashboard aggregates

Three independent read-only aggregates over **all** import orders (no ownership filter):

- **status_breakdown**: one row per status present, with order count and summed `total_amount`.
- **monthly_trends**: one row per `YYYY-MM` month with orders created on or after the same
  calendar day twelve months ago; most recent month first. Empty months are absent.
- **top_suppliers**: every supplier, including those without orders (outer join), ranked by
  summed `total_amount` descending, then by supplier id; at most `limit` rows.

All sums are computed by the database and returned as `Decimal` with two places.
"""
import calendar
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from importhub.model.base import utcnow
from importhub.model.import_order import ImportOrder
from importhub.model.supplier import Supplier
from importhub.schemas.dashboard import DashboardOut, MonthlyTrend, StatusBreakdown, TopSupplier

TREND_MONTHS = 12
DEFAULT_TOP_SUPPLIERS = 5


def months_before(moment: datetime, months: int) -> datetime:
    """Same day `months` months earlier at midnight; the day is clamped to the month's length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return datetime(year, month, day)


def _month_bucket(dialect_name: str, column):
    if dialect_name == "postgresql":
        return func.to_char(column, "YYYY-MM")
    if dialect_name in ("mysql", "mariadb"):
        return func.date_format(column, "%Y-%m")
    return func.strftime("%Y-%m", column)


def _total_value():
    return func.coalesce(func.sum(ImportOrder.total_amount), 0)


async def status_breakdown(session: AsyncSession) -> List[StatusBreakdown]:
    result = await session.execute(
        select(
            ImportOrder.status,
            func.count(ImportOrder.id).label("order_count"),
            _total_value().label("total_value"),
        )
        .group_by(ImportOrder.status)
        .order_by(ImportOrder.status)
    )
    return [
        StatusBreakdown(status=row.status, count=row.order_count, total_value=row.total_value)
        for row in result.all()
    ]


async def monthly_trends(session: AsyncSession, now: Optional[datetime] = None) -> List[MonthlyTrend]:
    cutoff = months_before(now or utcnow(), TREND_MONTHS)
    month = _month_bucket(session.bind.dialect.name, ImportOrder.created_at).label("month")

    result = await session.execute(
        select(
            month,
            func.count(ImportOrder.id).label("imports_count"),
            _total_value().label("total_value"),
        )
        .where(ImportOrder.created_at >= cutoff)
        .group_by(month)
        .order_by(month.desc())
    )
    return [
        MonthlyTrend(month=row.month, imports_count=row.imports_count, total_value=row.total_value)
        for row in result.all()
    ]


async def top_suppliers(session: AsyncSession, limit: int = DEFAULT_TOP_SUPPLIERS) -> List[TopSupplier]:
    total_value = _total_value().label("total_value")
    result = await session.execute(
        select(
            Supplier.id,
            Supplier.name,
            func.count(ImportOrder.id).label("imports_count"),
            total_value,
        )
        .outerjoin(ImportOrder, ImportOrder.supplier_id == Supplier.id)
        .group_by(Supplier.id, Supplier.name)
        .order_by(total_value.desc(), Supplier.id.asc())
        .limit(limit)
    )
    return [
        TopSupplier(id=row.id, name=row.name, imports_count=row.imports_count, total_value=row.total_value)
        for row in result.all()
    ]


async def dashboard_stats(session: AsyncSession, top_limit: int = DEFAULT_TOP_SUPPLIERS,
                          now: Optional[datetime] = None) -> DashboardOut:
    return DashboardOut(
        status_breakdown=await status_breakdown(session),
        monthly_trends=await monthly_trends(session, now=now),
        top_suppliers=await top_suppliers(session, limit=top_limit),
    )
