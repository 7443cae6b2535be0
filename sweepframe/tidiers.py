"""
Turn fitted model objects into tidy pandas DataFrames.
"""
import pandas as pd

from sweepframe.errors import MalformedInput
from sweepframe.index import _reset_time_index
from sweepframe.utilities import (
    _assert_features_not_in_list,
    _assert_valid_column_name,
)
from sweepframe.variants import _get_rule


def tidy(model, registry=None) -> pd.DataFrame:
    """
    Return a model's coefficients with one row per estimated term.

    Parameters
    ----------
    model : object
        A fitted model from a registered family (e.g., statsmodels'
        ARIMAResults or ETSResults)
    registry : Registry, default None
        The rules used to identify model. Uses default_registry() if None.

    Returns
    -------
    pd.DataFrame with columns term, estimate, std.error, statistic, and
    p.value. Statistics the model can't provide (e.g., standard errors for
    Holt-Winters) are NaN.
    """
    rule = _get_rule(model, registry)

    return rule.get("tidy")(model).reset_index(drop=True)


def glance(model, registry=None) -> pd.DataFrame:
    """
    Return a one-row summary of a model's fit.

    Parameters
    ----------
    model : object
        A fitted model from a registered family
    registry : Registry, default None
        The rules used to identify model. Uses default_registry() if None.

    Returns
    -------
    pd.DataFrame with a single row and columns model.desc, sigma, logLik, AIC,
    BIC, ME, RMSE, MAE, MPE, MAPE, MASE, and ACF1. Values a model family can't
    provide are NaN.
    """
    rule = _get_rule(model, registry)

    return pd.DataFrame([rule.get("glance")(model)])


def augment(
    model, data=None, rename_index="index", timetk_idx=False, registry=None
) -> pd.DataFrame:
    """
    Return a model's fitted values and residuals alongside the original data.

    Parameters
    ----------
    model : object
        A fitted model from a registered family
    data : pd.DataFrame or pd.Series, default None
        The data the model was fit on. If given, its columns are kept and
        .fitted and .resid are appended; otherwise the model's own series is
        returned as .actual.
    rename_index : str, default "index"
        The name of the output's time index column
    timetk_idx : bool, default False
        If True, render the index as calendar dates when available. Otherwise
        use numeric periods.
    registry : Registry, default None
        The rules used to identify model. Uses default_registry() if None.
    """
    _assert_valid_column_name(rename_index)

    rule = _get_rule(model, registry)
    augmented = rule.get("augment")(model)

    if data is None:
        return _reset_time_index(augmented, rename_index, timetk_idx)

    data = data.to_frame() if isinstance(data, pd.Series) else data.copy(deep=True)

    if len(data) != len(augmented):
        raise MalformedInput(
            f"data has {len(data)} rows but the model was fit on {len(augmented)} observations."
        )

    _assert_features_not_in_list(
        [".fitted", ".resid", rename_index],
        list(data.columns),
        "data already contains columns that augment() would add",
    )

    data[".fitted"] = augmented[".fitted"].to_numpy()
    data[".resid"] = augmented[".resid"].to_numpy()

    return _reset_time_index(data, rename_index, timetk_idx)


def tidy_decomp(
    model, timetk_idx=False, rename_index="index", registry=None
) -> pd.DataFrame:
    """
    Return a model's decomposition (or estimated states) with one row per
    observation.

    Parameters
    ----------
    model : object
        A seasonal decomposition (seasonal_decompose, STL, MSTL) or a fitted
        ETS, Holt-Winters, or structural model
    timetk_idx : bool, default False
        If True, render the index as calendar dates when available. Otherwise
        use numeric periods.
    rename_index : str, default "index"
        The name of the output's time index column
    registry : Registry, default None
        The rules used to identify model. Uses default_registry() if None.

    Returns
    -------
    pd.DataFrame. Decompositions have observed, season (or season_<period>),
    trend, remainder, and seasadj columns; smoothing and structural models have
    observed plus their level, slope, and season states.
    """
    _assert_valid_column_name(rename_index)

    rule = _get_rule(model, registry)
    components = rule.get("tidy_decomp")(model)

    return _reset_time_index(components, rename_index, timetk_idx)
