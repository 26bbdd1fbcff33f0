from typing import Dict, Iterable

from dentalbill.db.models import Bill
from dentalbill.schemas.analytics import AnalyticsResponse

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def aggregate_monthly_revenue(bills: Iterable[Bill]) -> Dict[str, float]:
    """Revenue per short month name ("Jan", "Feb", ...), in first-seen order."""
    revenue: Dict[str, float] = {}
    for bill in bills:
        month = MONTHS[bill.created_at.month - 1]
        revenue[month] = revenue.get(month, 0) + bill.total_amount
    return revenue


def aggregate_revenue_per_patient(bills: Iterable[Bill]) -> Dict[str, float]:
    revenue: Dict[str, float] = {}
    for bill in bills:
        revenue[bill.patient_name] = revenue.get(bill.patient_name, 0) + bill.total_amount
    return revenue


def summarize(bills: Iterable[Bill]) -> AnalyticsResponse:
    bills = list(bills)
    return AnalyticsResponse(
        total_bills=len(bills),
        total_revenue=sum(bill.total_amount for bill in bills),
        unique_patients=len({bill.patient_name for bill in bills}),
        monthly_revenue=aggregate_monthly_revenue(bills),
        revenue_per_patient=aggregate_revenue_per_patient(bills),
    )
