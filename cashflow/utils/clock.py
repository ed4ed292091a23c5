"""
Clock helpers.

Timestamps are stored as epoch milliseconds; calendar logic uses naive dates.
"""
import time
from datetime import date


def now_ms() -> int:
    return int(time.time() * 1000)


def today() -> date:
    return date.today()
