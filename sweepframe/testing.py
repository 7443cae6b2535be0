import numpy as np
import pandas as pd
import pytest

# monthly totals of international airline passengers (thousands), 1949-1960
_AIR_PASSENGERS = [
    112, 118, 132, 129, 121, 135, 148, 148, 136, 119, 104, 118,
    115, 126, 141, 135, 125, 149, 170, 170, 158, 133, 114, 140,
    145, 150, 178, 163, 172, 178, 199, 199, 184, 162, 146, 166,
    171, 180, 193, 181, 183, 218, 230, 242, 209, 191, 172, 194,
    196, 196, 236, 235, 229, 243, 264, 272, 237, 211, 180, 201,
    204, 188, 235, 227, 234, 264, 302, 293, 259, 229, 203, 229,
    242, 233, 267, 269, 270, 315, 364, 347, 312, 274, 237, 278,
    284, 277, 317, 313, 318, 374, 413, 405, 355, 306, 271, 306,
    315, 301, 356, 348, 355, 422, 465, 467, 404, 347, 305, 336,
    340, 318, 362, 348, 363, 435, 491, 505, 404, 359, 310, 337,
    360, 342, 406, 396, 420, 472, 548, 559, 463, 407, 362, 405,
    417, 391, 419, 461, 472, 535, 622, 606, 508, 461, 390, 432,
]  # fmt: skip


@pytest.mark.skip(reason="shortcut for default pandas behavior")
def get_test_series(with_dates=True):
    """
    Return the monthly airline passengers series. If with_dates is False,
    return a plain numpy array so models don't see any dates.
    """
    values = np.array(_AIR_PASSENGERS, dtype=float)

    if not with_dates:
        return values

    index = pd.date_range(start="1949-01-01", periods=len(values), freq="MS")

    return pd.Series(values, index=index, name="passengers")


@pytest.mark.skip(reason="shortcut for fitting a default model")
def get_test_arima(series=None, order=(2, 1, 1), **kwargs):
    """Return a fitted statsmodels ARIMA; with d=1 and no trend it has ar1, ar2, and ma1 terms"""
    from statsmodels.tsa.arima.model import ARIMA

    if series is None:
        series = get_test_series()

    return ARIMA(series, order=order, **kwargs).fit()


@pytest.mark.skip(reason="shortcut for fitting a default model")
def get_test_ets(series=None, **kwargs):
    """Return a fitted additive ETS(A,A,A) model"""
    from statsmodels.tsa.exponential_smoothing.ets import ETSModel

    if series is None:
        series = get_test_series()

    params = {
        "error": "add",
        "trend": "add",
        "seasonal": "add",
        "seasonal_periods": 12,
        **kwargs,
    }

    return ETSModel(series, **params).fit(disp=False)


@pytest.mark.skip(reason="shortcut for fitting a default model")
def get_test_holt_winters(series=None, **kwargs):
    """Return a fitted additive Holt-Winters model"""
    from statsmodels.tsa.holtwinters import ExponentialSmoothing

    if series is None:
        series = get_test_series()

    params = {
        "trend": "add",
        "seasonal": "add",
        "seasonal_periods": 12,
        "initialization_method": "estimated",
        **kwargs,
    }

    return ExponentialSmoothing(series, **params).fit()


@pytest.mark.skip(reason="shortcut for fitting a default model")
def get_test_structural(series=None, **kwargs):
    """Return a fitted local linear trend model with a monthly seasonal"""
    from statsmodels.tsa.statespace.structural import UnobservedComponents

    if series is None:
        series = get_test_series()

    params = {"level": "local linear trend", "seasonal": 12, **kwargs}

    return UnobservedComponents(series, **params).fit(disp=False)


@pytest.mark.skip(reason="shortcut for a default decomposition")
def get_test_decomposition(series=None, method="classical", model="additive"):
    """
    Return a classical ("classical") or STL ("stl") decomposition of series.
    model ("additive" or "multiplicative") only applies to classical ones.
    """
    from statsmodels.tsa.seasonal import STL, seasonal_decompose

    if series is None:
        series = get_test_series()

    if method == "stl":
        return STL(series, period=12).fit()

    return seasonal_decompose(series, model=model, period=12)


class FittedAutoARIMA:
    """
    Stand-in for a fitted auto-ARIMA estimator (e.g., pmdarima's), which keeps
    its statsmodels fit in arima_res_.
    """

    def __init__(self, arima_res_):
        self.arima_res_ = arima_res_


@pytest.mark.skip(reason="shortcut for fitting a default model")
def get_test_auto_arima(order=(1, 1, 1)):
    """Return an auto-ARIMA stand-in fit on the dateless airline series"""
    from statsmodels.tsa.statespace.sarimax import SARIMAX

    results = SARIMAX(get_test_series(with_dates=False), order=order).fit(disp=False)

    return FittedAutoARIMA(results)


def _get_difference_threshold():
    """
    Return desired threshold, measured as np.sum(np.abs((returned - answered)))
    in most cases.
    """
    return 1e-6
