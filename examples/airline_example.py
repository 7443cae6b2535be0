import pandas as pd
from statsmodels.tsa.arima.model import ARIMA
from statsmodels.tsa.holtwinters import ExponentialSmoothing
from statsmodels.tsa.seasonal import STL

import sweepframe as sf
from sweepframe import testing

series = testing.get_test_series()

# fit a couple of models to the monthly airline passengers data
arima = ARIMA(series, order=(2, 1, 1), seasonal_order=(0, 1, 1, 12)).fit()
holt_winters = ExponentialSmoothing(
    series,
    trend="add",
    seasonal="mul",
    seasonal_periods=12,
    initialization_method="estimated",
).fit()

# coefficients and fit statistics share the same columns across model families
print(sf.tidy(arima))
print(pd.concat([sf.glance(arima), sf.glance(holt_winters)], ignore_index=True))

# residual diagnostics, indexed by date
print(sf.augment(arima, timetk_idx=True).head())

# a 2-year forecast with 80% and 95% intervals, appended to the history
forecast = sf.make_forecast(arima, h=24, level=[80, 95])
print(forecast)
print(sf.sweep(forecast, fitted=True, timetk_idx=True).tail(30))

# simulated intervals for Holt-Winters
forecast = sf.make_forecast(holt_winters, h=24, random_state=42)
print(sf.sweep(forecast).head())

# seasonal decomposition as a table
print(sf.tidy_decomp(STL(series, period=12).fit(), timetk_idx=True).head())
