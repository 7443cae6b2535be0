import numpy as np
import pandas as pd
import pytest

from sweepframe import index, testing


def test_get_periods_per_year():
    monthly = pd.date_range("2000-01-01", periods=5, freq="MS")
    quarterly = pd.date_range("2000-01-01", periods=5, freq="QS")
    annual = pd.date_range("2000-01-01", periods=5, freq="YS")
    daily = pd.date_range("2000-01-01", periods=5, freq="D")

    assert index.get_periods_per_year(monthly) == 12
    assert index.get_periods_per_year(quarterly) == 4
    assert index.get_periods_per_year(annual) == 1
    assert index.get_periods_per_year(daily) is None
    assert index.get_periods_per_year(pd.RangeIndex(5)) is None


def test_get_periods_per_year_infers_frequency():
    dates = pd.DatetimeIndex(["2020-01-01", "2020-02-01", "2020-03-01", "2020-04-01"])

    assert index.get_periods_per_year(dates) == 12


def test_get_numeric_index():
    quarterly = pd.date_range("2000-01-01", periods=5, freq="QS")
    daily = pd.date_range("2000-01-01", periods=3, freq="D")

    result = index.get_numeric_index(quarterly)
    answer = np.array([2000.0, 2000.25, 2000.5, 2000.75, 2001.0])

    assert np.sum(np.abs(result - answer)) <= testing._get_difference_threshold()
    assert index.get_numeric_index(daily).tolist() == [1, 2, 3]


def test_get_numeric_index_with_freq_source():
    history = pd.date_range("2000-01-01", periods=3, freq="MS")
    future = pd.date_range("2000-04-01", periods=2, freq="MS")
    combined = pd.DatetimeIndex(list(history) + list(future))

    result = index.get_numeric_index(combined, freq_source=history)
    answer = 2000 + np.arange(5) / 12

    assert np.sum(np.abs(result - answer)) <= testing._get_difference_threshold()


def test_render_index_dates():
    periods = pd.period_range("2000-01", periods=3, freq="M")

    result = index.render_index(periods, timetk_idx=True)

    assert isinstance(result, pd.DatetimeIndex)
    assert result[0] == pd.Timestamp("2000-01-01")


def test_render_index_fallback(capsys):
    result = index.render_index(pd.RangeIndex(3), timetk_idx=True)

    assert result.tolist() == [1, 2, 3]
    assert "No date index found" in capsys.readouterr().out


def test__make_future_index():
    monthly = pd.date_range("2000-01-01", periods=3, freq="MS")
    periods = pd.period_range("2000Q1", periods=2, freq="Q")

    assert index._make_future_index(monthly, 2).tolist() == [
        pd.Timestamp("2000-04-01"),
        pd.Timestamp("2000-05-01"),
    ]
    assert index._make_future_index(periods, 1)[0] == pd.Period("2000Q3", freq="Q")
    assert index._make_future_index(pd.RangeIndex(4), 2).tolist() == [4, 5]


def test__reset_time_index():
    data = pd.DataFrame(
        {"value": [1.0, 2.0]}, index=pd.date_range("2000-01-01", periods=2, freq="YS")
    )

    result = index._reset_time_index(data, rename_index="year")

    assert list(result.columns) == ["year", "value"]
    assert result["year"].tolist() == [2000.0, 2001.0]


if __name__ == "__main__":
    test_get_periods_per_year()
    test_get_periods_per_year_infers_frequency()
    test_get_numeric_index()
    test_get_numeric_index_with_freq_source()
    test_render_index_dates()
    test__make_future_index()
    test__reset_time_index()

    print("Finished with index tests!")
