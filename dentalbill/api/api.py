from fastapi import APIRouter
from dentalbill.api.v1 import analytics, appointments, auth, bills, clinic, patients

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(bills.router, prefix="/bills", tags=["bills"])
api_router.include_router(clinic.router, prefix="/clinic", tags=["clinic"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
