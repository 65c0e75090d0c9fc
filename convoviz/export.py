"""Tabular export of the current view."""

from __future__ import annotations

import pandas as pd

from convoviz.actions import ViewState


def signals_frame(state: ViewState) -> pd.DataFrame:
    """Both input signals side by side on their shared time grid."""
    if not state.has_signals:
        return pd.DataFrame()
    return pd.DataFrame({"t": state.x1, "x1(t)": state.y1, "x2(t)": state.y2})


def convolution_frame(state: ViewState) -> pd.DataFrame:
    if not state.has_convolution:
        return pd.DataFrame()
    return pd.DataFrame({"t": state.x_conv, "y(t)": state.y_conv})


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")
