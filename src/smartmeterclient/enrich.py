from __future__ import annotations
import datetime as dt
import logging
import pandas as pd
from typing import List, Tuple

from .models import ConsumptionSeries, MeterValue, YearlyConsumptionSeries

INTERVALS_PER_DAY = 96

_log = logging.getLogger(__name__)

_COLUMNS = ['value', 'peak_demand', 'peak_demand_time']


def day_frame(values: List[MeterValue]) -> pd.DataFrame:
    """Quarter-hour readings as a frame indexed by UTC interval end."""
    if not values:
        return pd.DataFrame(columns=['value'], index=pd.DatetimeIndex([], tz='UTC', name='timestamp'))
    df = pd.DataFrame({
        'timestamp': pd.to_datetime([v.timestamp for v in values], utc=True),
        'value': pd.array([v.value for v in values], dtype='Float64'),
    })
    return df.set_index('timestamp')


def _series_frame(index: pd.DatetimeIndex, values, peaks, times) -> pd.DataFrame:
    # arrays are index-aligned by contract; pad short ones and cut long ones to the value count
    n = len(index)

    def pad(seq):
        seq = list(seq)
        if len(seq) > n:
            _log.debug("Dropping %s entries beyond %s values", len(seq) - n, n)
            seq = seq[:n]
        return seq + [None] * (n - len(seq))

    return pd.DataFrame({
        'value': pd.array(pad(values), dtype='Float64'),
        'peak_demand': pd.array(pad(peaks), dtype='Float64'),
        'peak_demand_time': pd.to_datetime(pad(times), utc=True),
    }, index=index)


def month_frame(series: ConsumptionSeries, date: dt.date) -> pd.DataFrame:
    """Daily readings of a month, entry ``i`` being day ``i + 1`` of ``date``'s month."""
    if not series.metered_values:
        return pd.DataFrame(columns=_COLUMNS, index=pd.DatetimeIndex([], name='day'))
    start = pd.Timestamp(year=date.year, month=date.month, day=1)
    index = pd.date_range(start, periods=len(series.metered_values), freq='D', name='day')
    return _series_frame(index, series.metered_values, series.metered_peak_demands, series.peak_demand_times)


def year_frame(series: YearlyConsumptionSeries, date: dt.date) -> pd.DataFrame:
    """Monthly readings of a year, entry ``i`` being month ``i + 1`` of ``date``'s year."""
    if not series.values:
        return pd.DataFrame(columns=_COLUMNS, index=pd.DatetimeIndex([], name='month'))
    start = pd.Timestamp(year=date.year, month=1, day=1)
    index = pd.date_range(start, periods=len(series.values), freq='MS', name='month')
    return _series_frame(index, series.values, series.peak_demands, series.peak_demand_times)


def detect_missing_intervals(values: List[MeterValue], expected: int = INTERVALS_PER_DAY) -> Tuple[int, int, int]:
    """Return (expected, actual, missing) quarter-hour readings for one day.

    A sample whose value is null counts as missing.
    """
    if not values:
        return (expected, 0, expected)
    df = day_frame(values)
    actual = int(df['value'].notna().sum())
    missing = max(0, expected - actual)
    return expected, actual, missing
