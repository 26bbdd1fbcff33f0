from pydantic import BaseModel
from typing import Optional

class SmsRequest(BaseModel):
    to: Optional[str] = None
    message: Optional[str] = None

class SmsResult(BaseModel):
    success: bool
    sid: Optional[str] = None
    error: Optional[str] = None
