"""Pandera DataFrame models for validating parsed prediction series."""

import pandas as pd
import pandera.pandas as pa
import pandera.typing as pa_typing


class PredictionDataModel(pa.DataFrameModel):
    """Water level predictions indexed by naive station-local time."""

    time: pa_typing.Index[pa.DateTime] = pa.Field(
        nullable=False, unique=True, check_name=True
    )
    level: pa_typing.Series[float] = pa.Field(nullable=False)

    @pa.dataframe_check(error="DataFrame must have at least one row")
    def check_not_empty(cls, df: pd.DataFrame) -> bool:
        """Check that the dataframe is not empty."""
        return not df.empty

    @pa.check("time", error="Index not sorted")
    def check_index_monotonic(cls, idx: pd.Index) -> bool:
        return bool(idx.is_monotonic_increasing)

    @pa.check("time", error="Index must be timezone naive")
    def check_index_tz_naive(cls, idx: pd.Index) -> bool:
        return idx.dt.tz is None

    class Config:
        """Pandera model configuration."""

        strict = True  # Disallow columns not specified in the schema
        coerce = False
