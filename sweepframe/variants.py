"""
The dispatch table that maps fitted model objects to their extraction routines.

Each supported model family is described by a VariantRule: a matcher that
recognizes the family's objects, plus one extractor per operation. Operations
a family doesn't support are left as None and raise UnsupportedVariant.

Support for new families is added explicitly on a Registry instance:

    registry = sf.default_registry()
    registry.register(sf.VariantRule(name="my_model", matcher=..., tidy=...))
    sf.tidy(my_model, registry=registry)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from statsmodels.tsa.exponential_smoothing.ets import ETSResults
from statsmodels.tsa.holtwinters import HoltWintersResults
from statsmodels.tsa.seasonal import DecomposeResult
from statsmodels.tsa.statespace.sarimax import SARIMAXResults
from statsmodels.tsa.statespace.structural import UnobservedComponentsResults

from sweepframe import models
from sweepframe.errors import UnsupportedVariant
from sweepframe.result import Forecast


class Variant(Enum):
    """The model families supported out of the box"""

    ARIMA = "arima"
    AUTO_ARIMA = "auto_arima"
    ETS = "ets"
    HOLT_WINTERS = "holt_winters"
    STRUCTURAL = "structural"
    DECOMPOSE = "decompose"
    FORECAST = "forecast"


OPERATIONS = ("tidy", "glance", "augment", "tidy_decomp", "forecast")


@dataclass(frozen=True)
class VariantRule:
    """
    Extraction rule for one model family.

    Parameters
    ----------
    name : str
        A unique name for the family (e.g., "arima")
    matcher : callable
        Returns True if an object belongs to this family
    tidy : callable, default None
        model -> pd.DataFrame with term, estimate, std.error, statistic, and
        p.value columns
    glance : callable, default None
        model -> dict of one-row summary statistics
    augment : callable, default None
        model -> pd.DataFrame with .actual, .fitted, and .resid columns,
        indexed by the model's time index
    tidy_decomp : callable, default None
        model -> pd.DataFrame of components, indexed by the model's time index
    forecast : callable, default None
        (model, h, levels, **kwargs) -> dict of Forecast fields
    """

    name: str
    matcher: Callable[[Any], bool]
    tidy: Optional[Callable] = None
    glance: Optional[Callable] = None
    augment: Optional[Callable] = None
    tidy_decomp: Optional[Callable] = None
    forecast: Optional[Callable] = None

    def get(self, operation: str) -> Callable:
        """Return the extractor for an operation, or raise UnsupportedVariant"""
        assert operation in OPERATIONS, f"operation should be one of {OPERATIONS}"

        extractor = getattr(self, operation)

        if extractor is None:
            raise UnsupportedVariant(
                f"{operation}() isn't available for {self.name} models."
            )

        return extractor


class Registry:
    """
    An ordered lookup table of VariantRules. Objects are matched against rules
    in registration order; the first match wins.
    """

    def __init__(self, rules=None):
        self._rules = {}

        for rule in rules or []:
            self.register(rule)

    def register(self, rule: VariantRule, replace: bool = False):
        """
        Add a rule to the registry.

        Parameters
        ----------
        rule : VariantRule
            The rule to add
        replace : bool, default False
            If True, overwrite an existing rule with the same name while
            keeping its position in the matching order.
        """
        assert isinstance(rule, VariantRule), "rule should be a VariantRule"
        assert (
            replace or rule.name not in self._rules
        ), f"A rule named '{rule.name}' is already registered. Pass replace=True to overwrite it."

        self._rules[rule.name] = rule

        return self

    def identify(self, model) -> VariantRule:
        """Return the first rule whose matcher accepts model"""
        for rule in self._rules.values():
            if rule.matcher(model):
                return rule

        raise UnsupportedVariant(
            f"No extraction rule is registered for {type(model).__name__} objects. "
            f"Registered variants: {', '.join(self._rules)}"
        )

    def copy(self):
        return Registry(self._rules.values())

    @property
    def names(self) -> list:
        return list(self._rules)

    def __contains__(self, name):
        return name in self._rules

    def __len__(self):
        return len(self._rules)

    def __repr__(self):
        return f"Registry({self.names})"


def _is_instance_of(*classes):
    """Build a matcher that checks the object behind any statsmodels ResultsWrapper"""

    def matcher(model):
        return isinstance(models._unwrap(model), classes)

    return matcher


def _is_auto_arima(model):
    results = getattr(model, "arima_res_", None)
    return results is not None and isinstance(models._unwrap(results), SARIMAXResults)


def _get_default_rules():
    return [
        VariantRule(
            name=Variant.ARIMA.value,
            matcher=_is_instance_of(SARIMAXResults),
            tidy=models._tidy_arima,
            glance=models._glance_arima,
            augment=models._augment_arima,
            forecast=models._forecast_arima,
        ),
        VariantRule(
            name=Variant.AUTO_ARIMA.value,
            matcher=_is_auto_arima,
            tidy=models._tidy_auto_arima,
            glance=models._glance_auto_arima,
            augment=models._augment_auto_arima,
            forecast=models._forecast_auto_arima,
        ),
        VariantRule(
            name=Variant.ETS.value,
            matcher=_is_instance_of(ETSResults),
            tidy=models._tidy_ets,
            glance=models._glance_ets,
            augment=models._augment_ets,
            tidy_decomp=models._decompose_ets,
            forecast=models._forecast_ets,
        ),
        VariantRule(
            name=Variant.HOLT_WINTERS.value,
            matcher=_is_instance_of(HoltWintersResults),
            tidy=models._tidy_holt_winters,
            glance=models._glance_holt_winters,
            augment=models._augment_holt_winters,
            tidy_decomp=models._decompose_holt_winters,
            forecast=models._forecast_holt_winters,
        ),
        VariantRule(
            name=Variant.STRUCTURAL.value,
            matcher=_is_instance_of(UnobservedComponentsResults),
            tidy=models._tidy_structural,
            glance=models._glance_structural,
            augment=models._augment_structural,
            tidy_decomp=models._decompose_structural,
            forecast=models._forecast_structural,
        ),
        VariantRule(
            name=Variant.DECOMPOSE.value,
            matcher=_is_instance_of(DecomposeResult),
            tidy_decomp=models._decompose_seasonal,
        ),
        VariantRule(
            name=Variant.FORECAST.value,
            matcher=lambda model: isinstance(model, Forecast),
            augment=models._augment_forecast,
        ),
    ]


def default_registry() -> Registry:
    """
    Return a new Registry populated with the built-in rules. Each call returns a
    fresh instance, so registering rules on one never affects another.
    """
    return Registry(_get_default_rules())


def identify_variant(model, registry: Registry = None) -> str:
    """Return the name of the registered variant that model belongs to"""
    return _get_rule(model, registry).name


def _get_rule(model, registry=None) -> VariantRule:
    if registry is None:
        registry = default_registry()

    return registry.identify(model)
