"""
Extraction routines for each supported model family.

Every family implements some subset of the following private extractors:

- _tidy_<family>(model) -> pd.DataFrame with one row per coefficient
- _glance_<family>(model) -> dict of one-row summary statistics
- _augment_<family>(model) -> pd.DataFrame of .actual, .fitted, and .resid
  indexed by the model's time index
- _decompose_<family>(model) -> pd.DataFrame of components indexed by the
  model's time index
- _forecast_<family>(model, h, levels, **kwargs) -> dict of Forecast fields

sweepframe.variants wires these into the dispatch table; families that don't
support an operation simply leave it out.
"""
import inspect
import re

import numpy as np
import pandas as pd

from sweepframe.accuracy import calc_accuracy, _calc_sigma
from sweepframe.errors import MalformedInput
from sweepframe.index import get_periods_per_year, _make_future_index
from sweepframe.utilities import _as_float_series, _tail

# statistics that statsmodels computes lazily and may fail to compute (e.g., a
# singular hessian); these are reported as NaN rather than failing the table
_OPTIONAL_STAT_ERRORS = (
    AttributeError,
    ValueError,
    NotImplementedError,
    np.linalg.LinAlgError,
)


def _unwrap(model):
    """Return the results object behind a statsmodels ResultsWrapper"""
    return getattr(model, "_results", model)


def _get_spec(model):
    """Return the statsmodels model specification attached to a results object"""
    return getattr(_unwrap(model), "model", None)


def _get_attribute(model, attribute):
    values = getattr(model, attribute, None)

    if values is None:
        raise MalformedInput(
            f"{type(_unwrap(model)).__name__} has no '{attribute}' attribute."
        )

    return values


def _as_period(value):
    """Coerce a seasonal period (int, list of ints, or None) to a single int"""
    try:
        return int(np.max(np.atleast_1d(value)))
    except (TypeError, ValueError):
        return None


def _get_observed(model):
    """Return the series a statsmodels model was fit on, with its original index"""
    spec = _get_spec(model)
    observed = getattr(getattr(spec, "data", None), "orig_endog", None)

    if observed is None:
        observed = getattr(spec, "endog", None)

    if observed is None:
        raise MalformedInput(
            f"Couldn't find the original series on {type(_unwrap(model)).__name__}."
        )

    if isinstance(observed, pd.DataFrame):
        observed = observed.iloc[:, 0]

    if isinstance(observed, pd.Series):
        return observed.astype(float)

    values = np.asarray(observed, dtype=float).ravel()
    return pd.Series(values, index=pd.RangeIndex(len(values)))


def _get_fitted_frame(model):
    """Return .actual, .fitted, and .resid columns indexed by the model's time index"""
    observed = _get_observed(model)

    fitted = _as_float_series(_get_attribute(model, "fittedvalues"), observed.index)
    residuals = _as_float_series(_get_attribute(model, "resid"), observed.index)

    return pd.DataFrame(
        {
            ".actual": observed.to_numpy(),
            ".fitted": fitted.to_numpy(),
            ".resid": residuals.to_numpy(),
        },
        index=observed.index,
    )


def _get_seasonal_period(model, index):
    """
    Return the seasonal period used to scale MASE: the model's own seasonal
    period if it has one, otherwise the number of periods per year of the index.
    """
    spec = _get_spec(model)

    period = _as_period(getattr(spec, "seasonal_periods", None))

    if not period or period < 2:
        seasonal_order = getattr(spec, "seasonal_order", None)
        period = _as_period(seasonal_order[-1]) if seasonal_order else None

    if not period or period < 2:
        period = get_periods_per_year(index)

    return period if period and period > 1 else 1


def _get_param_names(model):
    names = getattr(_unwrap(model), "param_names", None)

    if names is None:
        names = getattr(_get_spec(model), "param_names", None)

    return None if names is None else list(names)


def _named_params(model):
    """
    Return a model's estimated parameters as a float series indexed by name.
    Some results (e.g., ETS) return params with a positional index, so the
    model's param_names take precedence over the series' own labels.
    """
    params = _get_attribute(model, "params")
    names = _get_param_names(model)

    if isinstance(params, pd.Series) and (names is None or list(params.index) == names):
        return params.astype(float)

    values = np.asarray(params, dtype=float).ravel()

    if names is None or len(names) != len(values):
        raise MalformedInput(
            f"Couldn't match the parameters of {type(_unwrap(model)).__name__} to their names."
        )

    return pd.Series(values, index=names)


def _get_optional_stat(model, attribute, names):
    """
    Return a per-parameter statistic labeled with the model's full list of
    parameter names, or NaNs if it's unavailable. Statistics are matched to
    names by position, since statsmodels reports them in params order.
    """
    try:
        values = getattr(model, attribute)
    except _OPTIONAL_STAT_ERRORS:
        values = None

    if values is None:
        return pd.Series(np.nan, index=names, dtype=float)

    values = np.asarray(values, dtype=float).ravel()

    if len(values) != len(names):
        return pd.Series(np.nan, index=names, dtype=float)

    return pd.Series(values, index=names)


def _coefficient_table(model, params, terms, names=None):
    """
    Build the tidy coefficient table; missing statistics become NaN.

    Parameters
    ----------
    model : object
        The fitted model
    params : pd.Series
        The estimates to report, indexed by parameter name
    terms : list
        The term labels to report for params
    names : pd.Index, default None
        Every parameter name the model estimated, in order. Pass this when
        params is a subset (e.g., without the innovation variance) so the
        model's statistics can still be matched by position.
    """
    names = params.index if names is None else names

    def get_stat(attribute):
        return _get_optional_stat(model, attribute, names).reindex(params.index).to_numpy()

    return pd.DataFrame(
        {
            "term": list(terms),
            "estimate": params.to_numpy(),
            "std.error": get_stat("bse"),
            "statistic": get_stat("tvalues"),
            "p.value": get_stat("pvalues"),
        }
    )


def _summarize_fit(model, description, sigma, loglik=np.nan, aic=np.nan, bic=np.nan):
    """Combine a model's fit statistics with its in-sample accuracy"""
    fitted = _get_fitted_frame(model)
    period = _get_seasonal_period(model, fitted.index)

    return {
        "model.desc": description,
        "sigma": float(sigma),
        "logLik": float(loglik),
        "AIC": float(aic),
        "BIC": float(bic),
        **calc_accuracy(fitted[".actual"], fitted[".fitted"], period=period),
    }


def _forecast_fields(model, method, mean, lower, upper):
    """Package a forecast's pieces into the keyword arguments of Forecast"""
    fitted = _get_fitted_frame(model)
    name = _get_observed(model).name

    return {
        "method": method,
        "observed": fitted[".actual"].rename(name),
        "fitted": fitted[".fitted"].rename(name),
        "residuals": fitted[".resid"].rename(name),
        "mean": mean.rename(name),
        "lower": pd.DataFrame(lower, index=mean.index),
        "upper": pd.DataFrame(upper, index=mean.index),
    }


def _find_column(frame, suffix):
    columns = [column for column in frame.columns if str(column).endswith(suffix)]

    if not columns:
        raise MalformedInput(
            f"Couldn't find a '*{suffix}' column in the prediction summary: {list(frame.columns)}"
        )

    return columns[0]


def _forecast_statespace(model, h, levels, method):
    """
    Forecast with a statsmodels results object that supports get_prediction(),
    taking interval bounds from its own summary_frame().
    """
    history = _get_observed(model)
    n = len(history)

    try:
        prediction = model.get_prediction(start=n, end=n + h - 1)
    except AttributeError as error:
        raise MalformedInput(
            f"{type(_unwrap(model)).__name__} couldn't forecast from the data it was "
            f"fit on ({error}). Refit the model on a pandas Series."
        ) from error

    index = _make_future_index(history.index, h)
    mean = _as_float_series(prediction.predicted_mean, index)

    lower, upper = {}, {}
    for level in levels:
        summary = prediction.summary_frame(alpha=1 - level / 100)
        lower[level] = np.asarray(summary[_find_column(summary, "lower")], dtype=float)
        upper[level] = np.asarray(summary[_find_column(summary, "upper")], dtype=float)

    return _forecast_fields(model, method, mean, lower, upper)


def _component_frame(observed, components):
    """Lay a decomposition's components next to the observed series"""
    frame = pd.DataFrame({"observed": observed.to_numpy(dtype=float)}, index=observed.index)

    for name, values in components.items():
        if values is None:
            raise MalformedInput(f"Couldn't find the fitted '{name}' component.")
        frame[name] = _tail(values, len(observed))

    return frame


def _has_component(spec, component):
    """Check whether an exponential smoothing spec includes a trend or seasonal component"""
    flag = getattr(spec, f"has_{component}", None)

    if flag is None:
        flag = getattr(spec, component, None)

    return bool(flag)


# ARIMA / SARIMAX ----------------------------------------------------------------

_ARIMA_TERM = re.compile(r"^(ar|ma)\.(S\.)?L(\d+)$")


def _rename_arima_terms(names):
    """
    Shorten statsmodels' ARIMA parameter names, e.g. "ar.L1" -> "ar1",
    "ma.S.L12" -> "sma1", and "const" -> "intercept".
    """
    seasonal_counts = {"ar": 0, "ma": 0}
    terms = []

    for name in names:
        match = _ARIMA_TERM.match(str(name))

        if not match:
            terms.append("intercept" if name == "const" else name)
        elif match.group(2):
            seasonal_counts[match.group(1)] += 1
            terms.append(f"s{match.group(1)}{seasonal_counts[match.group(1)]}")
        else:
            terms.append(f"{match.group(1)}{match.group(3)}")

    return terms


def _get_trend_names(model):
    """
    Return the conventional names of an ARIMA's trend terms ("const", "drift",
    "trend.<i>"). statsmodels' ARIMA fits its trend as leading exogenous
    regressors, so these can show up under generic names like "x1".
    """
    spec_arima = getattr(_get_spec(model), "_spec_arima", None)
    trend_terms = getattr(spec_arima, "trend_terms", None)

    if trend_terms is None:
        return []

    names = {0: "const", 1: "drift"}
    return [names.get(int(term), f"trend.{int(term)}") for term in trend_terms]


def _get_arima_params(model):
    params = _named_params(model)
    trend_names = _get_trend_names(model)

    if trend_names and len(params) >= len(trend_names):
        params = params.set_axis(trend_names + list(params.index[len(trend_names) :]))

    return params


def _format_order(order):
    return ",".join(str(value) for value in order)


def _describe_arima(model, params=None):
    spec = _get_spec(model)

    order = getattr(spec, "order", None)
    seasonal_order = getattr(spec, "seasonal_order", None)

    description = "ARIMA" if order is None else f"ARIMA({_format_order(order)})"

    if seasonal_order is not None and _as_period(seasonal_order[-1]):
        description += (
            f"({_format_order(seasonal_order[:3])})[{_as_period(seasonal_order[-1])}]"
        )

    if params is None:
        params = _get_arima_params(model)

    if "const" in params.index or "intercept" in params.index:
        description += " with non-zero mean"
    elif "drift" in params.index:
        description += " with drift"

    return description


def _tidy_arima(model):
    estimates = _get_arima_params(model)

    # the innovation variance is reported by glance() as sigma
    is_coefficient = np.array(
        [not str(name).startswith("sigma2") for name in estimates.index], dtype=bool
    )
    params = estimates[is_coefficient]

    return _coefficient_table(
        model, params, _rename_arima_terms(params.index), names=estimates.index
    )


def _glance_arima(model):
    results = _unwrap(model)
    params = _get_arima_params(model)

    if "sigma2" in params.index:
        sigma2 = params["sigma2"]
    else:
        sigma2 = getattr(results, "scale", np.nan)

    return _summarize_fit(
        model,
        description=_describe_arima(model, params),
        sigma=np.sqrt(float(sigma2)),
        loglik=results.llf,
        aic=results.aic,
        bic=results.bic,
    )


def _augment_arima(model):
    return _get_fitted_frame(model)


def _forecast_arima(model, h, levels, **kwargs):
    return _forecast_statespace(model, h, levels, method=_describe_arima(model))


# auto-ARIMA estimators (e.g., pmdarima) wrap a fitted SARIMAX result -----------


def _get_auto_arima_results(model):
    results = getattr(model, "arima_res_", None)

    if results is None:
        raise MalformedInput(
            "The auto-ARIMA estimator hasn't been fit yet; no arima_res_ found."
        )

    return results


def _tidy_auto_arima(model):
    return _tidy_arima(_get_auto_arima_results(model))


def _glance_auto_arima(model):
    return _glance_arima(_get_auto_arima_results(model))


def _augment_auto_arima(model):
    return _augment_arima(_get_auto_arima_results(model))


def _forecast_auto_arima(model, h, levels, **kwargs):
    return _forecast_arima(_get_auto_arima_results(model), h, levels)


# Exponential smoothing: ETS and Holt-Winters -----------------------------------

_SMOOTHING_TERMS = {
    "smoothing_level": "alpha",
    "smoothing_trend": "beta",
    "smoothing_seasonal": "gamma",
    "damping_trend": "phi",
    "initial_level": "l",
    "initial_trend": "b",
}

_COMPONENT_CODES = {
    "add": "A",
    "additive": "A",
    "mul": "M",
    "multiplicative": "M",
}


def _rename_smoothing_terms(names):
    """
    Shorten statsmodels' smoothing parameter names, e.g. "smoothing_level" ->
    "alpha" and "initial_seasonal.3" -> "s3".
    """
    terms = []

    for name in names:
        if name in _SMOOTHING_TERMS:
            terms.append(_SMOOTHING_TERMS[name])
        elif str(name).startswith("initial_seasonal"):
            suffix = str(name).rsplit(".", 1)[-1]
            terms.append(f"s{suffix}" if suffix.isdigit() else "s0")
        else:
            terms.append(name)

    return terms


def _get_component_code(value):
    if not value:
        return "N"
    return _COMPONENT_CODES.get(value, "N")


def _describe_components(spec):
    trend = _get_component_code(getattr(spec, "trend", None))

    if trend != "N" and getattr(spec, "damped_trend", False):
        trend += "d"

    seasonal = _get_component_code(getattr(spec, "seasonal", None))

    return trend, seasonal


def _describe_ets(model):
    spec = _get_spec(model)
    error = _get_component_code(getattr(spec, "error", None))
    trend, seasonal = _describe_components(spec)

    return f"ETS({error},{trend},{seasonal})"


def _tidy_ets(model):
    params = _named_params(model)
    return _coefficient_table(model, params, _rename_smoothing_terms(params.index))


def _glance_ets(model):
    results = _unwrap(model)
    params = _named_params(model)

    return _summarize_fit(
        model,
        description=_describe_ets(model),
        sigma=_calc_sigma(_get_attribute(model, "resid"), n_params=len(params)),
        loglik=results.llf,
        aic=results.aic,
        bic=results.bic,
    )


def _augment_ets(model):
    return _get_fitted_frame(model)


def _decompose_ets(model):
    results = _unwrap(model)
    spec = _get_spec(model)

    components = {"level": getattr(results, "level", None)}

    if _has_component(spec, "trend"):
        components["slope"] = getattr(results, "slope", None)

    if _has_component(spec, "seasonal"):
        components["season"] = getattr(results, "season", None)

    return _component_frame(_get_observed(model), components)


def _forecast_ets(model, h, levels, **kwargs):
    return _forecast_statespace(model, h, levels, method=_describe_ets(model))


_HOLT_WINTERS_PARAMS = [
    "smoothing_level",
    "smoothing_trend",
    "smoothing_seasonal",
    "damping_trend",
    "initial_level",
    "initial_trend",
]


def _get_holt_winters_params(model):
    """
    Return the estimated Holt-Winters parameters as a float series. Parameters
    that don't apply to the model (e.g., beta without a trend) are NaN in
    statsmodels and are dropped here.
    """
    params = getattr(_unwrap(model), "params", None)

    if not isinstance(params, dict):
        raise MalformedInput("Holt-Winters results should carry a dict of params.")

    estimates = {}

    for name in _HOLT_WINTERS_PARAMS:
        value = params.get(name)
        if value is not None and np.isfinite(value):
            estimates[_SMOOTHING_TERMS[name]] = float(value)

    seasons = params.get("initial_seasons")

    if seasons is not None:
        for position, value in enumerate(np.atleast_1d(seasons)):
            if np.isfinite(value):
                estimates[f"s{position}"] = float(value)

    if not estimates:
        raise MalformedInput("No estimated parameters found on the Holt-Winters results.")

    return pd.Series(estimates, dtype=float)


def _describe_holt_winters(model):
    trend, seasonal = _describe_components(_get_spec(model))
    return f"Holt-Winters({trend},{seasonal})"


def _tidy_holt_winters(model):
    params = _get_holt_winters_params(model)
    return _coefficient_table(model, params, params.index)


def _glance_holt_winters(model):
    results = _unwrap(model)
    params = _get_holt_winters_params(model)

    return _summarize_fit(
        model,
        description=_describe_holt_winters(model),
        sigma=_calc_sigma(_get_attribute(model, "resid"), n_params=len(params)),
        aic=getattr(results, "aic", np.nan),
        bic=getattr(results, "bic", np.nan),
    )


def _augment_holt_winters(model):
    return _get_fitted_frame(model)


def _decompose_holt_winters(model):
    results = _unwrap(model)
    spec = _get_spec(model)

    components = {"level": getattr(results, "level", None)}

    if _has_component(spec, "trend"):
        components["slope"] = getattr(results, "trend", None)

    if _has_component(spec, "seasonal"):
        components["season"] = getattr(results, "season", None)

    return _component_frame(_get_observed(model), components)


def _get_seed_argument(model, random_state):
    """
    Return the keyword argument that seeds model.simulate(): a Generator passed
    as rng on current statsmodels, or random_state on releases that predate it.
    """
    parameters = inspect.signature(_unwrap(model).simulate).parameters

    if "rng" in parameters:
        return {"rng": np.random.default_rng(random_state)}

    return {"random_state": random_state}


def _forecast_holt_winters(
    model, h, levels, repetitions=1000, random_state=None, **kwargs
):
    """
    Holt-Winters results don't carry prediction intervals, so bounds are taken
    from quantiles of simulated future paths that resample the model's residuals.
    """
    history = _get_observed(model)
    index = _make_future_index(history.index, h)

    mean = _as_float_series(model.forecast(h), index)

    lower, upper = {}, {}

    if levels:
        simulations = np.asarray(
            model.simulate(
                h,
                repetitions=repetitions,
                error="add",
                random_errors="bootstrap",
                **_get_seed_argument(model, random_state),
            ),
            dtype=float,
        ).reshape(h, -1)

        for level in levels:
            tail = (1 - level / 100) / 2
            lower[level] = np.quantile(simulations, tail, axis=1)
            upper[level] = np.quantile(simulations, 1 - tail, axis=1)

    return _forecast_fields(model, _describe_holt_winters(model), mean, lower, upper)


# Structural (unobserved components) models -------------------------------------

_STRUCTURAL_TERMS = {
    "sigma2.irregular": "epsilon",
    "sigma2.level": "level",
    "sigma2.trend": "slope",
    "sigma2.seasonal": "season",
}


def _describe_structural(model):
    spec = _get_spec(model)

    trend = getattr(spec, "trend_specification", None)
    description = f"UnobservedComponents({trend})" if trend else "UnobservedComponents"

    period = _as_period(getattr(spec, "seasonal_periods", None))
    if period and period > 1:
        description += f"[{period}]"

    return description


def _tidy_structural(model):
    params = _named_params(model)
    terms = [_STRUCTURAL_TERMS.get(name, name) for name in params.index]

    return _coefficient_table(model, params, terms)


def _glance_structural(model):
    results = _unwrap(model)
    params = _named_params(model)

    if "sigma2.irregular" in params.index:
        sigma = np.sqrt(params["sigma2.irregular"])
    else:
        sigma = _calc_sigma(_get_attribute(model, "resid"), n_params=len(params))

    return _summarize_fit(
        model,
        description=_describe_structural(model),
        sigma=sigma,
        loglik=results.llf,
        aic=results.aic,
        bic=results.bic,
    )


def _augment_structural(model):
    return _get_fitted_frame(model)


def _decompose_structural(model):
    results = _unwrap(model)

    components = {}

    for name, attribute in (("level", "level"), ("slope", "trend"), ("season", "seasonal")):
        state = getattr(results, attribute, None)
        if state is not None:
            components[name] = getattr(state, "smoothed", None)

    if not components:
        raise MalformedInput("The structural model has no smoothed states to decompose.")

    return _component_frame(_get_observed(model), components)


def _forecast_structural(model, h, levels, **kwargs):
    return _forecast_statespace(model, h, levels, method=_describe_structural(model))


# Seasonal decompositions (classical, STL, MSTL) --------------------------------


def _get_seasonal_components(seasonal, length):
    """Return {"season": ...} or, for several seasonal periods, {"season_<period>": ...}"""
    if isinstance(seasonal, pd.Series) or np.ndim(seasonal) == 1:
        return {"season": _tail(seasonal, length)}

    if not isinstance(seasonal, pd.DataFrame):
        seasonal = pd.DataFrame(np.asarray(seasonal, dtype=float))

    if seasonal.shape[1] == 1:
        return {"season": _tail(seasonal.iloc[:, 0], length)}

    components = {}

    for position, column in enumerate(seasonal.columns):
        if isinstance(column, str) and "_" in column:
            suffix = column.rsplit("_", 1)[-1]
        else:
            suffix = str(position + 1)
        components[f"season_{suffix}"] = _tail(seasonal[column], length)

    return components


def _is_multiplicative(frame, seasons):
    """
    Check whether a decomposition's components multiply (rather than add) up
    to the observed series, comparing both fits over the rows where every
    component is defined.
    """
    components = frame[["observed", "trend", "remainder", *seasons]]
    finite = np.isfinite(components).all(axis=1)

    if not finite.any():
        return False

    components = components[finite]
    observed = components["observed"]

    additive = components[["trend", "remainder", *seasons]].sum(axis=1)
    multiplicative = components[["trend", "remainder", *seasons]].prod(axis=1)

    return np.abs(observed - multiplicative).sum() < np.abs(observed - additive).sum()


def _decompose_seasonal(model):
    observed = getattr(model, "observed", None)

    if observed is None:
        raise MalformedInput("The decomposition has no observed series.")

    if isinstance(observed, pd.DataFrame):
        observed = observed.iloc[:, 0]

    if not isinstance(observed, pd.Series):
        observed = pd.Series(np.asarray(observed, dtype=float).ravel())

    length = len(observed)
    seasons = _get_seasonal_components(_get_attribute(model, "seasonal"), length)

    frame = _component_frame(observed, seasons)
    frame["trend"] = _tail(_get_attribute(model, "trend"), length)
    frame["remainder"] = _tail(_get_attribute(model, "resid"), length)
    if _is_multiplicative(frame, list(seasons)):
        frame["seasadj"] = frame["observed"] / frame[list(seasons)].prod(axis=1)
    else:
        frame["seasadj"] = frame["observed"] - frame[list(seasons)].sum(axis=1)

    return frame


# Forecast records ---------------------------------------------------------------


def _augment_forecast(forecast):
    return pd.DataFrame(
        {
            ".actual": forecast.observed.to_numpy(dtype=float),
            ".fitted": forecast.fitted.to_numpy(dtype=float),
            ".resid": forecast.residuals.to_numpy(dtype=float),
        },
        index=forecast.observed.index,
    )
