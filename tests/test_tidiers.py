import numpy as np
import pandas as pd
import pytest

import sweepframe as sf
from sweepframe import testing


def test_tidy_arima():
    model = testing.get_test_arima()

    result = sf.tidy(model)

    assert list(result.columns) == [
        "term",
        "estimate",
        "std.error",
        "statistic",
        "p.value",
    ]
    assert result["term"].tolist() == ["ar1", "ar2", "ma1"]
    assert np.isfinite(result["estimate"]).all()


def test_tidy_arima_without_constant():
    model = testing.get_test_arima(order=(2, 0, 1), trend="n")

    result = sf.tidy(model)

    assert result["term"].tolist() == ["ar1", "ar2", "ma1"]


def test_tidy_auto_arima():
    result = sf.tidy(testing.get_test_auto_arima())

    assert result["term"].tolist() == ["ar1", "ma1"]
    assert result["std.error"].notna().all()
    assert result["p.value"].notna().all()


def test_tidy_arima_without_dates_keeps_standard_errors():
    with_dates = sf.tidy(testing.get_test_arima())
    without_dates = sf.tidy(
        testing.get_test_arima(testing.get_test_series(with_dates=False))
    )

    assert without_dates["term"].tolist() == ["ar1", "ar2", "ma1"]
    assert without_dates["std.error"].notna().all()

    difference = np.abs(without_dates["std.error"] - with_dates["std.error"]).max()
    assert difference <= 1e-3


def test_tidy_arima_drift():
    model = testing.get_test_arima(order=(1, 1, 0), trend="t")

    result = sf.tidy(model)

    assert result["term"].tolist() == ["drift", "ar1"]
    assert sf.glance(model).loc[0, "model.desc"] == "ARIMA(1,1,0) with drift"


def test_tidy_arima_intercept():
    model = testing.get_test_arima(order=(1, 0, 0), trend="c")

    result = sf.tidy(model)

    assert result["term"].tolist() == ["intercept", "ar1"]
    assert sf.glance(model).loc[0, "model.desc"].endswith("with non-zero mean")


def test__named_params_uses_param_names():
    class _Results:
        params = pd.Series([0.5, 0.1])
        param_names = ["smoothing_level", "smoothing_trend"]

    result = sf.models._named_params(_Results())

    assert result.index.tolist() == ["smoothing_level", "smoothing_trend"]
    assert result.tolist() == [0.5, 0.1]


def test_tidy_seasonal_arima_terms():
    names = ["ar.L1", "ma.L1", "ar.S.L12", "ar.S.L24", "ma.S.L12", "const", "sigma2"]

    result = sf.models._rename_arima_terms(names)

    assert result == ["ar1", "ma1", "sar1", "sar2", "sma1", "intercept", "sigma2"]


def test_tidy_ets():
    model = testing.get_test_ets()

    result = sf.tidy(model)

    assert len(result) == len(model.params)
    assert {"alpha", "beta", "gamma", "l", "b"}.issubset(set(result["term"]))
    assert all(isinstance(term, str) for term in result["term"])


def test_tidy_holt_winters():
    model = testing.get_test_holt_winters()

    result = sf.tidy(model)

    assert {"alpha", "beta", "gamma", "l", "b", "s0"}.issubset(set(result["term"]))

    # Holt-Winters fits don't estimate standard errors
    assert result["std.error"].isna().all()
    assert result["p.value"].isna().all()


def test_tidy_structural():
    model = testing.get_test_structural()

    result = sf.tidy(model)

    assert len(result) == len(model.params)
    assert set(result["term"]) == {"epsilon", "level", "slope", "season"}


def test_tidy_does_not_modify_model():
    model = testing.get_test_arima()
    params = model.params.copy()

    sf.tidy(model)
    sf.glance(model)
    sf.augment(model)

    assert params.equals(model.params)


def test_glance_arima():
    model = testing.get_test_arima()

    result = sf.glance(model)

    assert len(result) == 1
    assert list(result.columns) == [
        "model.desc",
        "sigma",
        "logLik",
        "AIC",
        "BIC",
        "ME",
        "RMSE",
        "MAE",
        "MPE",
        "MAPE",
        "MASE",
        "ACF1",
    ]
    assert result.loc[0, "model.desc"].startswith("ARIMA(2,1,1)")
    assert result.loc[0, "sigma"] > 0

    difference = np.abs(result.loc[0, "AIC"] - model.aic)
    assert difference <= testing._get_difference_threshold()


def test_glance_ets():
    result = sf.glance(testing.get_test_ets())

    assert len(result) == 1
    assert result.loc[0, "model.desc"] == "ETS(A,A,A)"
    assert np.isfinite(result.loc[0, "logLik"])


def test_glance_holt_winters():
    result = sf.glance(testing.get_test_holt_winters())

    assert len(result) == 1
    assert result.loc[0, "model.desc"] == "Holt-Winters(A,A)"

    # no likelihood is available for Holt-Winters fits
    assert np.isnan(result.loc[0, "logLik"])
    assert result.loc[0, "RMSE"] > 0


def test_glance_structural():
    result = sf.glance(testing.get_test_structural())

    assert len(result) == 1
    assert result.loc[0, "model.desc"].startswith("UnobservedComponents")
    assert np.isfinite(result.loc[0, "AIC"])


def test_glance_returns_one_row_per_model():
    models = [
        testing.get_test_arima(),
        testing.get_test_auto_arima(),
        testing.get_test_ets(),
        testing.get_test_holt_winters(),
        testing.get_test_structural(),
    ]

    for model in models:
        result = sf.glance(model)

        assert len(result) == 1
        assert result.columns[0] == "model.desc"


def test_augment_arima():
    series = testing.get_test_series()
    model = testing.get_test_arima(series)

    result = sf.augment(model)

    assert list(result.columns) == ["index", ".actual", ".fitted", ".resid"]
    assert len(result) == len(series)
    assert result[".actual"].tolist() == series.tolist()

    difference = np.nansum(
        np.abs(result[".actual"] - result[".fitted"] - result[".resid"])
    )
    assert difference <= testing._get_difference_threshold()

    answer = 1949 + 1 / 12
    assert result.loc[0, "index"] == 1949.0
    assert np.abs(result.loc[1, "index"] - answer) <= testing._get_difference_threshold()


def test_augment_with_data():
    series = testing.get_test_series()
    data = series.to_frame()
    model = testing.get_test_arima(series)

    result = sf.augment(model, data=data, timetk_idx=True, rename_index="date")

    assert list(result.columns) == ["date", "passengers", ".fitted", ".resid"]
    assert len(result) == len(series)
    assert result.loc[0, "date"] == pd.Timestamp("1949-01-01")

    # the caller's frame isn't modified
    assert list(data.columns) == ["passengers"]


def test_augment_rejects_mismatched_data():
    series = testing.get_test_series()
    model = testing.get_test_arima(series)

    with pytest.raises(sf.MalformedInput):
        sf.augment(model, data=series.iloc[:-1])


def test_augment_rejects_bad_rename_index():
    model = testing.get_test_arima()

    assert pytest.raises(AssertionError, sf.augment, model, None, "")


def test_augment_without_dates():
    model = testing.get_test_arima(testing.get_test_series(with_dates=False))

    result = sf.augment(model)

    assert result["index"].tolist() == list(range(1, 145))


def test_augment_forecast():
    model = testing.get_test_arima()
    forecast = sf.make_forecast(model, h=6)

    result = sf.augment(forecast)

    assert list(result.columns) == ["index", ".actual", ".fitted", ".resid"]
    assert len(result) == 144


def test_tidy_decomp_classical():
    series = testing.get_test_series()

    result = sf.tidy_decomp(testing.get_test_decomposition(series))

    assert list(result.columns) == [
        "index",
        "observed",
        "season",
        "trend",
        "remainder",
        "seasadj",
    ]
    assert len(result) == len(series)

    # a centered moving average leaves the first half-season without a trend
    assert result["trend"].iloc[:6].isna().all()

    difference = np.sum(
        np.abs(result["seasadj"] - (result["observed"] - result["season"]))
    )
    assert difference <= testing._get_difference_threshold()


def test_tidy_decomp_multiplicative():
    decomposition = testing.get_test_decomposition(model="multiplicative")

    result = sf.tidy_decomp(decomposition)

    assert len(result) == 144

    # seasonal factors scale the series rather than shifting it
    difference = np.sum(
        np.abs(result["seasadj"] - (result["observed"] / result["season"]))
    )
    assert difference <= testing._get_difference_threshold()
    assert result.loc[0, "seasadj"] > result.loc[0, "observed"]


def test_tidy_decomp_stl():
    result = sf.tidy_decomp(
        testing.get_test_decomposition(method="stl"), timetk_idx=True
    )

    assert len(result) == 144
    assert result["trend"].notna().all()
    assert result.loc[0, "index"] == pd.Timestamp("1949-01-01")


def test_tidy_decomp_ets():
    result = sf.tidy_decomp(testing.get_test_ets())

    assert len(result) == 144
    assert {"observed", "level", "slope", "season"}.issubset(set(result.columns))


def test_tidy_decomp_holt_winters():
    result = sf.tidy_decomp(testing.get_test_holt_winters())

    assert len(result) == 144
    assert {"observed", "level", "slope", "season"}.issubset(set(result.columns))


def test_tidy_decomp_structural():
    result = sf.tidy_decomp(testing.get_test_structural())

    assert list(result.columns) == ["index", "observed", "level", "slope", "season"]
    assert len(result) == 144


def test_unsupported_operations():
    decomposition = testing.get_test_decomposition()
    model = testing.get_test_arima()

    with pytest.raises(sf.UnsupportedVariant):
        sf.tidy(decomposition)

    with pytest.raises(sf.UnsupportedVariant):
        sf.glance(object())

    with pytest.raises(sf.UnsupportedVariant):
        sf.tidy_decomp(model)

    # UnsupportedVariant is also a TypeError
    with pytest.raises(TypeError):
        sf.augment("not a model")


if __name__ == "__main__":
    test_tidy_arima()
    test_tidy_arima_without_constant()
    test_tidy_auto_arima()
    test_tidy_arima_without_dates_keeps_standard_errors()
    test_tidy_arima_drift()
    test_tidy_arima_intercept()
    test__named_params_uses_param_names()
    test_tidy_seasonal_arima_terms()
    test_tidy_ets()
    test_tidy_holt_winters()
    test_tidy_structural()
    test_tidy_does_not_modify_model()
    test_glance_arima()
    test_glance_ets()
    test_glance_holt_winters()
    test_glance_structural()
    test_glance_returns_one_row_per_model()
    test_augment_arima()
    test_augment_with_data()
    test_augment_rejects_mismatched_data()
    test_augment_rejects_bad_rename_index()
    test_augment_without_dates()
    test_augment_forecast()
    test_tidy_decomp_classical()
    test_tidy_decomp_multiplicative()
    test_tidy_decomp_stl()
    test_tidy_decomp_ets()
    test_tidy_decomp_holt_winters()
    test_tidy_decomp_structural()
    test_unsupported_operations()

    print("Finished with tidier tests!")
