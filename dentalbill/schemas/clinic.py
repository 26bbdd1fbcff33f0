from pydantic import BaseModel
from datetime import time
from typing import List, Optional

DEFAULT_CLINIC_NAME = "Your Dental Clinic"
DEFAULT_OPERATING_HOURS = "Mon–Sat, 9:00 AM – 7:00 PM"
NOT_PROVIDED = "Not Provided"

class OperatingHoursInput(BaseModel):
    days: List[str] = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    start_time: time = time(9, 0)
    end_time: time = time(19, 0)

class ClinicProfileUpdate(BaseModel):
    """Fields left out keep their stored value."""
    clinic_name: Optional[str] = None
    reg_no: Optional[str] = None
    gst_no: Optional[str] = None
    dentists: Optional[List[str]] = None
    operating_hours: Optional[OperatingHoursInput] = None

class ClinicProfileResponse(BaseModel):
    clinic_name: str = ""
    reg_no: str = ""
    gst_no: str = ""
    operating_hours: str = ""
    logo_url: str = ""
    signature_url: str = ""
    dentists: List[str] = []

    class Config:
        from_attributes = True

class ReceiptBranding(BaseModel):
    """Clinic profile with the printed defaults applied to every blank field."""
    clinic_name: str = DEFAULT_CLINIC_NAME
    reg_no: str = NOT_PROVIDED
    gst_no: str = NOT_PROVIDED
    operating_hours: str = DEFAULT_OPERATING_HOURS
    logo_url: str = ""
    logo_path: str = ""
    signature_url: str = ""
    signature_path: str = ""
    dentists: List[str] = []
