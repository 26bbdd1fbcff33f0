import re
from datetime import datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
CURRENCY_CODE = "INR"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_name(name: str) -> str:
    return name.strip().casefold()


def normalize_phone(phone: Optional[str]) -> str:
    return (phone or "").strip()


def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(PHONE_PATTERN.match(normalize_phone(phone)))


def _group_indian(digits: str) -> str:
    # Last three digits form one group, the rest are grouped in pairs (12,34,567)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_amount(amount, decimals: int = 2) -> str:
    """Format a number with Indian digit grouping, e.g. 123456.5 -> '1,23,456.50'."""
    value = Decimal(str(amount or 0))
    quant = Decimal(1).scaleb(-decimals) if decimals else Decimal(1)
    value = value.quantize(quant, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    whole, _, fraction = text.partition(".")
    grouped = _group_indian(whole)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(amount) -> str:
    """Currency text for PDFs: the code is written out since the base fonts lack a rupee glyph."""
    return f"{CURRENCY_CODE} {format_amount(amount)}"


def format_clock(value: time) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_operating_hours(days: Sequence[str], start: time, end: time) -> str:
    selected = [day for day in WEEKDAYS if day in set(days)] or ["Mon"]
    if len(selected) == 7:
        day_range = "Mon–Sun"
    else:
        day_range = f"{selected[0]}–{selected[-1]}"
    return f"{day_range}, {format_clock(start)} to {format_clock(end)}"


def safe_filename(name: str) -> str:
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", name.strip())
    return cleaned.strip("_") or "file"

