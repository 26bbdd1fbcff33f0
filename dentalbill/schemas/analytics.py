from pydantic import BaseModel
from typing import Dict

class AnalyticsResponse(BaseModel):
    total_bills: int
    total_revenue: float
    unique_patients: int
    monthly_revenue: Dict[str, float]
    revenue_per_patient: Dict[str, float]
