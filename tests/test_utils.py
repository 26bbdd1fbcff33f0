from datetime import time

import pytest

from dentalbill.core.utils import (
    format_amount,
    format_clock,
    format_currency,
    format_operating_hours,
    is_valid_phone,
    normalize_name,
    safe_filename,
)


@pytest.mark.parametrize("amount, expected", [
    (0, "0.00"),
    (999, "999.00"),
    (1200, "1,200.00"),
    (123456.5, "1,23,456.50"),
    (10000000, "1,00,00,000.00"),
    (None, "0.00"),
])
def test_indian_grouping(amount, expected):
    assert format_amount(amount) == expected


def test_whole_rupees():
    assert format_amount(2000, 0) == "2,000"
    assert format_amount(0.125) == "0.13"


def test_currency_text():
    assert format_currency(1500) == "INR 1,500.00"


def test_phone_and_name_rules():
    assert is_valid_phone(" 9876543210 ")
    assert not is_valid_phone("0876543210")
    assert not is_valid_phone(None)
    assert normalize_name("  Ravi KUMAR ") == "ravi kumar"


def test_clock():
    assert format_clock(time(9, 0)) == "9:00 AM"
    assert format_clock(time(0, 30)) == "12:30 AM"
    assert format_clock(time(12, 0)) == "12:00 PM"
    assert format_clock(time(19, 5)) == "7:05 PM"


def test_operating_hours():
    weekdays = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert format_operating_hours(weekdays, time(9), time(19)) == "Mon–Sat, 9:00 AM to 7:00 PM"
    every_day = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert format_operating_hours(every_day, time(8), time(20)) == "Mon–Sun, 8:00 AM to 8:00 PM"
    # Days are put in week order before the range is taken
    assert format_operating_hours(["Fri", "Tue"], time(10), time(13)) == "Tue–Fri, 10:00 AM to 1:00 PM"
    assert format_operating_hours([], time(9), time(17)) == "Mon–Mon, 9:00 AM to 5:00 PM"


def test_safe_filename():
    assert safe_filename("upper jaw (1).png") == "upper_jaw_1_.png"
    assert safe_filename("   ") == "file"
