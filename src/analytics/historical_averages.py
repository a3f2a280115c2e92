from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from src.analytics.goal_plan import DEFAULT_COMMISSION_PERCENT
from src.models.objectives import FinancialMetricRecord
from src.schemas.objectives import HistoricalAverages


def compute_historical_averages(rows: Iterable[FinancialMetricRecord]) -> HistoricalAverages:
    sales = Decimal("0")
    commission = Decimal("0")
    deals = 0
    for row in rows:
        sales += row.total_sales_volume or Decimal("0")
        commission += row.total_gross_commission or Decimal("0")
        deals += row.closed_deals_count or 0

    avg_ticket = float(sales / deals) if deals > 0 else 0.0
    avg_commission_percent = (
        float(commission / sales * 100) if sales > 0 else DEFAULT_COMMISSION_PERCENT
    )
    return HistoricalAverages(
        avg_ticket=avg_ticket,
        avg_commission_percent=avg_commission_percent,
        closed_deals_count=deals,
    )
