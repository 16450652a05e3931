from typing import Iterable, Protocol, runtime_checkable

import numpy as np
import pandas as pd


@runtime_checkable
class Indicator(Protocol):
    name: str
    lookback: int

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes the indicator values.

        Args:
            ohlcv: A DataFrame containing OHLCV data.

        Returns:
            A DataFrame with the computed indicator values. The index must match
            the input index. Positions that cannot be computed yet hold NaN.
        """
        ...


def validate_ohlcv(df: pd.DataFrame) -> None:
    """
    Validates that the input DataFrame contains the required OHLCV columns.

    Args:
        df: Input DataFrame.

    Raises:
        ValueError: If required columns are missing.
    """
    required_columns = {"open", "high", "low", "close", "volume"}
    if not required_columns.issubset(df.columns):
        missing = required_columns - set(df.columns)
        raise ValueError(f"Input DataFrame missing required columns: {missing}")


def require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    for col in columns:
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not found in input DataFrame.")


def check_monotonic_definedness(values: np.ndarray, name: str = "series") -> None:
    """
    Asserts that an indicator series never reverts to NaN once defined.

    Args:
        values: 1-D float array where NaN marks "not yet computable".
        name: Label used in the error message.

    Raises:
        ValueError: If a NaN appears after the first defined value.
    """
    defined = ~np.isnan(values)
    if not defined.any():
        return
    first = int(np.argmax(defined))
    if not defined[first:].all():
        gap = first + int(np.argmin(defined[first:]))
        raise ValueError(
            f"{name}: value at index {gap} is undefined after first defined index {first}"
        )
