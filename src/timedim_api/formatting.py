"""Rendering of temporal attribute values read from file stores."""

from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

import pandas as pd

from timedim_api.config import DEFAULT_DATE_FORMAT


class TemporalFormatter:
    """Format dates and timestamps with a fixed ``strftime`` pattern.

    Naive values are taken to be in ``timezone``; aware values are converted
    to it, so ``%z`` always renders an offset such as ``+0000``.
    """

    def __init__(self, pattern: str = DEFAULT_DATE_FORMAT, timezone: str | tzinfo = "UTC") -> None:
        self.pattern = pattern
        self.timezone = ZoneInfo(timezone) if isinstance(timezone, str) else timezone

    def format(self, value: Any) -> str | None:
        """Return the formatted value, or ``None`` for null and non-temporal values."""
        if value is None or value is pd.NaT:
            return None
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            moment = datetime.combine(value, time())
        else:
            return None

        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.timezone)
        else:
            moment = moment.astimezone(self.timezone)
        return moment.strftime(self.pattern)

    __call__ = format

    def __repr__(self) -> str:
        return f"<TemporalFormatter {self.pattern!r} {self.timezone}>"
