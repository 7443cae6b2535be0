"""
Build forecasts from fitted models and sweep them into long-format tables.
"""
import pandas as pd

from sweepframe.errors import UnsupportedVariant
from sweepframe.index import render_index
from sweepframe.result import Forecast
from sweepframe.utilities import (
    _assert_valid_column_name,
    _format_level,
    _normalize_levels,
)
from sweepframe.variants import _get_rule


def make_forecast(model, h, level=(80, 95), registry=None, **kwargs) -> Forecast:
    """
    Forecast a fitted model h periods ahead and bundle the result with the
    model's history.

    Parameters
    ----------
    model : object
        A fitted model from a registered family that supports forecasting
        (ARIMA, auto-ARIMA, ETS, Holt-Winters, or structural)
    h : int
        The number of periods to forecast
    level : int, float, or list, default (80, 95)
        Confidence levels for the prediction intervals, as percentages or
        fractions. Pass None or an empty list to skip intervals.
    registry : Registry, default None
        The rules used to identify model. Uses default_registry() if None.

    Additional Parameters (passed as **kwargs to the family's forecaster)
    ----------
    repetitions : int, default 1000
        Holt-Winters only. The number of simulated paths used to estimate
        prediction intervals.
    random_state : int, default None
        Holt-Winters only. Seed for the simulated paths.
    """
    assert int(h) == h and h > 0, f"h should be a positive integer; got {h}"

    levels = _normalize_levels(level)

    rule = _get_rule(model, registry)
    fields = rule.get("forecast")(model, int(h), levels, **kwargs)

    return Forecast(level=levels, **fields)


def _get_value_name(forecast):
    name = forecast.observed.name
    return "value" if name is None else str(name)


def sweep(forecast, fitted=False, timetk_idx=False, rename_index="index") -> pd.DataFrame:
    """
    Convert a Forecast into a long-format DataFrame with one row per period.

    Parameters
    ----------
    forecast : Forecast
        The output of make_forecast()
    fitted : bool, default False
        If True, prepend the historical actuals to the forecast horizon
    timetk_idx : bool, default False
        If True, render the index as calendar dates when available. Otherwise
        use numeric periods, continuing the history's numbering into the
        horizon.
    rename_index : str, default "index"
        The name of the output's time index column

    Returns
    -------
    pd.DataFrame with columns [rename_index, "key", <value>, "lo.<level>",
    "hi.<level>", ...]. key is "actual" for historical rows and "forecast"
    for the horizon; interval bounds are NaN for actuals. The value column
    takes the name of the original series, or "value" if it had none.
    """
    if not isinstance(forecast, Forecast):
        raise UnsupportedVariant(
            f"sweep() expects a Forecast from make_forecast(), got {type(forecast).__name__}."
        )

    _assert_valid_column_name(rename_index)

    value_name = _get_value_name(forecast)

    forecasts = pd.DataFrame(
        {"key": "forecast", value_name: forecast.mean.to_numpy(dtype=float)}
    )

    for level in forecast.level:
        label = _format_level(level)
        forecasts[f"lo.{label}"] = forecast.lower[level].to_numpy(dtype=float)
        forecasts[f"hi.{label}"] = forecast.upper[level].to_numpy(dtype=float)

    # render the full index at once so numeric periods continue past the history
    history_index = forecast.observed.index
    index = render_index(
        history_index.append(forecast.mean.index),
        timetk_idx=timetk_idx,
        freq_source=history_index,
    )

    if fitted:
        actuals = pd.DataFrame(
            {"key": "actual", value_name: forecast.observed.to_numpy(dtype=float)}
        )
        output = pd.concat([actuals, forecasts], axis=0, ignore_index=True)
    else:
        output = forecasts
        index = index[len(history_index) :]

    output.insert(0, rename_index, index)

    return output
