"""
Helpers to render a model's time index either as calendar dates or as numeric
periods.
"""
import numpy as np
import pandas as pd

# leading character of a pandas frequency string -> periods per year
_PERIODS_PER_YEAR = {"A": 1, "Y": 1, "Q": 4, "M": 12}


def _has_date_index(index) -> bool:
    return isinstance(index, (pd.DatetimeIndex, pd.PeriodIndex))


def _get_frequency(index):
    """Return the index's frequency string, inferring it when it isn't set"""
    if not _has_date_index(index):
        return None

    freq = getattr(index, "freqstr", None)

    if freq is None and isinstance(index, pd.DatetimeIndex) and len(index) >= 3:
        freq = pd.infer_freq(index)

    return freq


def get_periods_per_year(index):
    """
    Return the number of periods per year for annual, quarterly, or monthly
    date indexes, and None for anything else (e.g., daily data or integer
    indexes).
    """
    freq = _get_frequency(index)

    if not freq:
        return None

    return _PERIODS_PER_YEAR.get(freq[0])


def _to_decimal_years(index, periods_per_year):
    """Express each date as year + fraction of year (e.g., Feb. 1949 -> 1949.083)"""
    years = np.asarray(index.year, dtype=float)

    if periods_per_year == 12:
        offsets = np.asarray(index.month, dtype=float) - 1
    elif periods_per_year == 4:
        offsets = np.asarray(index.quarter, dtype=float) - 1
    else:
        offsets = np.zeros(len(index))

    return years + offsets / periods_per_year


def _to_timestamps(index):
    if isinstance(index, pd.PeriodIndex):
        return index.to_timestamp()
    return index


def get_numeric_index(index, freq_source=None):
    """
    Render an index as numeric periods: decimal years for annual, quarterly, and
    monthly data, and 1-based positions otherwise.

    Parameters
    ----------
    index : pd.Index
        The index you want to render.
    freq_source : pd.Index, default None
        The index to infer the frequency from. Useful when index is the result
        of appending a forecast horizon to a history, since pandas drops the
        frequency on append.
    """
    freq_source = index if freq_source is None else freq_source

    periods_per_year = (
        get_periods_per_year(freq_source) if _has_date_index(index) else None
    )

    if periods_per_year:
        return _to_decimal_years(index, periods_per_year)

    return np.arange(1, len(index) + 1)


def render_index(index, timetk_idx=False, freq_source=None):
    """
    Render an index for output tables.

    Parameters
    ----------
    index : pd.Index
        The model's time index.
    timetk_idx : bool, default False
        If True, return calendar dates when the index carries them. Indexes
        without dates fall back to numeric periods.
    freq_source : pd.Index, default None
        See get_numeric_index.
    """
    if timetk_idx:
        if _has_date_index(index):
            return _to_timestamps(index)

        print("No date index found; returning numeric periods instead..")

    return get_numeric_index(index, freq_source=freq_source)


def _make_future_index(index, periods):
    """
    Extend an index forward by a number of periods, using dates when the index
    has a known frequency and integer positions otherwise.
    """
    freq = _get_frequency(index)

    if _has_date_index(index) and freq and len(index):
        last_date = index.max()

        if isinstance(index, pd.PeriodIndex):
            return pd.period_range(start=last_date + 1, periods=periods, freq=freq)

        dates = pd.date_range(start=last_date, periods=periods + 1, freq=freq)
        dates = dates[dates > last_date]  # drop start if equals last_date
        return dates[:periods]

    return pd.RangeIndex(len(index), len(index) + periods)


def _reset_time_index(data, rename_index="index", timetk_idx=False):
    """
    Move a frame's time index into its first column, named rename_index, and
    replace the index with a default RangeIndex.
    """
    values = render_index(data.index, timetk_idx=timetk_idx)

    output = data.reset_index(drop=True)
    output.insert(0, rename_index, values)

    return output
