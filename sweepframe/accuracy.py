"""
In-sample accuracy measures reported by glance().
"""
import numpy as np


def _get_accuracy_names():
    return ["ME", "RMSE", "MAE", "MPE", "MAPE", "MASE", "ACF1"]


def _calc_ME(errors):
    return np.mean(errors)


def _calc_RMSE(errors):
    return np.sqrt(np.mean(errors ** 2))


def _calc_MAE(errors):
    return np.mean(np.abs(errors))


def _calc_percent_errors(errors, actuals):
    """Percent errors, or None if any actual is zero"""
    if (actuals == 0).any():
        return None
    return 100 * errors / actuals


def _calc_MASE(errors, series, period=1):
    """
    Mean absolute scaled error, scaled by the in-sample MAE of a (seasonal)
    naive forecast that repeats the value from `period` steps earlier.
    """
    series = series[np.isfinite(series)]

    if len(series) <= period:
        return np.nan

    scale = np.mean(np.abs(series[period:] - series[:-period]))

    if not np.isfinite(scale) or scale == 0:
        return np.nan

    return _calc_MAE(errors) / scale


def _calc_ACF1(errors):
    """Lag-1 autocorrelation of the errors"""
    if len(errors) < 2:
        return np.nan

    centered = errors - errors.mean()
    denominator = np.sum(centered ** 2)

    if denominator == 0:
        return np.nan

    return np.sum(centered[1:] * centered[:-1]) / denominator


def calc_accuracy(actuals, fitted, period=1) -> dict:
    """
    Calculate in-sample error metrics for a set of fitted values.

    Parameters
    ----------
    actuals : array-like
        The observed series.
    fitted : array-like
        The model's fitted values, aligned with actuals.
    period : int, default 1
        The lag used for MASE's naive scaling forecast. Pass the seasonal
        period to scale against a seasonal naive forecast.

    Returns
    -------
    dict with keys ME, RMSE, MAE, MPE, MAPE, MASE, ACF1. Metrics that can't
    be calculated (e.g., percent errors when an actual is zero) are NaN.
    """
    actuals = np.asarray(actuals, dtype=float).ravel()
    fitted = np.asarray(fitted, dtype=float).ravel()

    assert len(actuals) == len(
        fitted
    ), f"actuals and fitted should be the same length: {len(actuals)} != {len(fitted)}"

    period = max(int(period), 1)

    mask = np.isfinite(actuals) & np.isfinite(fitted)
    errors = actuals[mask] - fitted[mask]

    if not len(errors):
        return {name: np.nan for name in _get_accuracy_names()}

    percent_errors = _calc_percent_errors(errors, actuals[mask])

    return {
        "ME": _calc_ME(errors),
        "RMSE": _calc_RMSE(errors),
        "MAE": _calc_MAE(errors),
        "MPE": np.nan if percent_errors is None else np.mean(percent_errors),
        "MAPE": np.nan if percent_errors is None else np.mean(np.abs(percent_errors)),
        "MASE": _calc_MASE(errors, actuals, period=period),
        "ACF1": _calc_ACF1(errors),
    }


def _calc_sigma(residuals, n_params=0):
    """Residual standard deviation, adjusted for the number of estimated parameters"""
    residuals = np.asarray(residuals, dtype=float).ravel()
    residuals = residuals[np.isfinite(residuals)]

    degrees_of_freedom = len(residuals) - n_params

    if degrees_of_freedom <= 0:
        return np.nan

    return np.sqrt(np.sum(residuals ** 2) / degrees_of_freedom)
