from sqlmodel import SQLModel
from .dentist import Dentist
from .clinic_profile import ClinicProfile
from .patient import Patient
from .appointment import Appointment
from .bill import Bill

__all__ = [
    "SQLModel",
    "Dentist",
    "ClinicProfile",
    "Patient",
    "Appointment",
    "Bill",
]
