import numpy as np
import pandas as pd
import pytest

from sweepframe.errors import MalformedInput


@pytest.mark.skip(reason="simple python functionality")
def _assert_features_not_in_list(features, list_to_check, message):
    """
    Throw assertion error if an element in a list of features already exists
    in another list
    """
    intersection = [feature for feature in features if feature in list_to_check]
    assert not intersection, f"{message}: {intersection}"


@pytest.mark.skip(reason="simple python functionality")
def _ensure_is_list(obj):
    """
    Return an object in a list if not already wrapped. Useful when you
    want to treat an object as a collection, even when the user passes a
    single level like 95
    """
    if obj is None:
        return []
    if not isinstance(obj, (list, tuple)):
        return [obj]
    else:
        return list(obj)


def _normalize_levels(level) -> tuple:
    """
    Convert user-specified confidence levels to sorted percentages.

    Parameters
    ----------
    level : int, float, or list of ints/floats
        Confidence levels as percentages (e.g., [80, 95]) or fractions
        (e.g., [.8, .95]). Fractions are only assumed when every level is
        below 1.
    """
    levels = [float(value) for value in _ensure_is_list(level)]

    if levels and all(0 < value < 1 for value in levels):
        levels = [round(value * 100, 6) for value in levels]

    assert all(
        0 < value < 100 for value in levels
    ), f"Confidence levels should be between 0 and 100: {levels}"

    return tuple(sorted(set(levels)))


def _format_level(level) -> str:
    """Format a level for use in column names (e.g., 80.0 -> "80", 99.5 -> "99.5")"""
    return f"{float(level):g}"


def _assert_valid_column_name(name, argument="rename_index"):
    assert (
        isinstance(name, str) and name
    ), f"{argument} should be a non-empty string; got {name!r}"


def _tail(values, length):
    """Return the last `length` values of a 1d array-like as floats"""
    array = np.asarray(values, dtype=float).ravel()

    if len(array) < length:
        raise MalformedInput(
            f"Expected at least {length} values but only found {len(array)}."
        )

    return array[len(array) - length :]


def _as_float_series(values, index, name=None):
    """Wrap an array-like in a float series that uses the given index"""
    if isinstance(values, pd.DataFrame):
        values = values.iloc[:, 0]

    array = np.asarray(values, dtype=float).ravel()

    if len(array) != len(index):
        raise MalformedInput(
            f"Expected {len(index)} values to match the index, got {len(array)}."
        )

    return pd.Series(array, index=index, name=name)
