"""
sweepframe - tidy tables from fitted time-series models for Python
=====================================================================
`sweepframe` converts fitted forecasting models and their forecasts into
rectangular pandas DataFrames, so that coefficients, fit statistics,
residuals, decompositions, and forecasts from very different model families
can be filtered, joined, and plotted the same way.

Main Features
-------------
- **One interface for many model families**: ARIMA/SARIMAX, auto-ARIMA
    estimators, ETS, Holt-Winters, structural (unobserved components) models,
    and classical/STL/MSTL decompositions from statsmodels.
- **Four table shapes**: `tidy` (one row per coefficient), `glance` (one row
    per model), `augment` (one row per observation), and `sweep` (one row per
    period of history and forecast, with prediction intervals per level).
- **Explicit extensibility**: support for a new model family is registered
    on a `Registry` instance, never through hidden global state.
"""
from sweepframe.errors import MalformedInput, SweepError, UnsupportedVariant
from sweepframe.forecast import make_forecast, sweep
from sweepframe.result import Forecast
from sweepframe.tidiers import augment, glance, tidy, tidy_decomp
from sweepframe.variants import (
    Registry,
    Variant,
    VariantRule,
    default_registry,
    identify_variant,
)
