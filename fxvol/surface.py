"""
Volatility surface data model.

A surface is a regular (tenor x delta) grid of implied vols in percent,
the shape the FX market quotes in: one row per tenor bucket (ON .. 2Y),
one column per delta point on the smile (50 call .. ATM .. 50 put).

Unlike an equity chain there is no scattered data to interpolate; the
gateway (or the synthetic generator) already delivers the grid. This
module just holds it, validates its shape, and offers a few views:

    - to_frame: pandas DataFrame indexed by tenor, columns by delta
    - smile: one tenor's row
    - compute_surface_statistics: quick diagnostics for the CLI / dashboard
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True, eq=False)
class VolatilitySurface:
    """
    Implied vol grid indexed [tenor][delta].

    Parameters
    ----------
    deltas : ordered delta levels (x-axis)
    tenors : ordered tenor labels (y-axis)
    matrix : 2D array, shape (len(tenors), len(deltas)), vols in percent
    """

    deltas: tuple
    tenors: tuple
    matrix: np.ndarray

    def __post_init__(self):
        deltas = tuple(self.deltas)
        tenors = tuple(self.tenors)
        matrix = np.array(self.matrix, dtype=float)

        if matrix.ndim != 2:
            raise ValueError(f"matrix must be 2D, got {matrix.ndim}D")
        if matrix.shape != (len(tenors), len(deltas)):
            raise ValueError(
                f"matrix shape {matrix.shape} does not match "
                f"{len(tenors)} tenors x {len(deltas)} deltas"
            )

        matrix.setflags(write=False)
        object.__setattr__(self, "deltas", deltas)
        object.__setattr__(self, "tenors", tenors)
        object.__setattr__(self, "matrix", matrix)

    @property
    def shape(self):
        return self.matrix.shape

    def smile(self, tenor: str) -> np.ndarray:
        """Vol row for a single tenor."""
        try:
            i = self.tenors.index(tenor)
        except ValueError:
            raise ValueError(f"Unknown tenor: {tenor}. Available: {', '.join(self.tenors)}")
        return self.matrix[i]

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(self.matrix, index=list(self.tenors), columns=list(self.deltas))
        df.index.name = "tenor"
        df.columns.name = "delta"
        return df


def compute_surface_statistics(surface: VolatilitySurface) -> dict:
    """
    Compute summary statistics for the vol surface.

    Returns
    -------
    dict with keys:
        n_tenors       : number of tenor rows
        n_deltas       : number of delta columns
        vol_range      : (min, max) in vol points
        atm_vol_mean   : average of the ATM (delta 0) column, NaN if absent
        skew_25d       : per-tenor 25-delta call vol minus put vol (pd.Series)
        term_slope     : last-tenor ATM minus first-tenor ATM, NaN if no ATM column
    """
    df = surface.to_frame()
    stats = {
        "n_tenors": len(surface.tenors),
        "n_deltas": len(surface.deltas),
        "vol_range": (float(surface.matrix.min()), float(surface.matrix.max())),
    }

    if 0 in df.columns:
        atm = df[0]
        stats["atm_vol_mean"] = float(atm.mean())
        stats["term_slope"] = float(atm.iloc[-1] - atm.iloc[0])
    else:
        stats["atm_vol_mean"] = np.nan
        stats["term_slope"] = np.nan

    # positive delta = call side, negative = put side
    if 25 in df.columns and -25 in df.columns:
        stats["skew_25d"] = df[25] - df[-25]
    else:
        stats["skew_25d"] = pd.Series(np.nan, index=df.index)

    return stats
