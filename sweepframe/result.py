"""
Forecast record consumed by sweep().
"""
from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class Forecast:
    """
    A model's history and forecast in one place, built by make_forecast().

    Parameters
    ----------
    method : str
        Description of the model that produced the forecast (e.g., "ARIMA(2,1,1)")
    observed : pd.Series
        The historical series the model was fit on
    fitted : pd.Series
        In-sample fitted values, aligned with observed
    residuals : pd.Series
        In-sample residuals, aligned with observed
    mean : pd.Series
        Point forecasts, indexed by the forecast horizon
    lower : pd.DataFrame
        Lower interval bounds; one column per confidence level
    upper : pd.DataFrame
        Upper interval bounds; one column per confidence level
    level : tuple of floats, default ()
        Confidence levels as percentages (e.g., (80.0, 95.0))
    """

    method: str
    observed: pd.Series
    fitted: pd.Series
    residuals: pd.Series
    mean: pd.Series
    lower: pd.DataFrame
    upper: pd.DataFrame
    level: tuple = field(default_factory=tuple)

    @property
    def horizon(self) -> int:
        return len(self.mean)

    def __len__(self):
        return self.horizon

    def __repr__(self):
        return (
            f"Forecast(method={self.method!r}, history={len(self.observed)}, "
            f"horizon={self.horizon}, level={list(self.level)})"
        )
