"""
Synthetic FX vol surface generator.

Keeps the dashboard usable without a live gateway (dev mode, demos,
gateway outages). The shape is deterministic, the levels are random:

    vol = base + |delta| * smile + tenor_index * term + noise

    - base ~ U[8, 12)      : overall vol level for the pair
    - |delta| term         : smile, wings richer than ATM
    - tenor term           : upward sloping term structure
    - noise ~ U[-0.25, 0.25)

Every cell is clamped into [5, 20] vol points. The result is not
arbitrage-checked; it exists for visual testing only.
"""

from typing import Optional, Sequence

import numpy as np

from . import config
from .surface import VolatilitySurface


def generate_mock_surface(
    pair: str = None,
    tenors: Sequence[str] = None,
    deltas: Sequence[float] = None,
    seed: Optional[int] = None,
) -> VolatilitySurface:
    """
    Generate a synthetic vol surface.

    Parameters
    ----------
    pair : currency pair (unused for now, every pair gets the same shape)
    tenors : tenor labels (default: config.TENOR_LABELS)
    deltas : delta levels (default: config.DELTA_VALUES)
    seed : random seed; None draws fresh values on every call

    Returns
    -------
    VolatilitySurface with shape (len(tenors), len(deltas))
    """
    if tenors is None:
        tenors = config.TENOR_LABELS
    if deltas is None:
        deltas = config.DELTA_VALUES
    if seed is not None:
        np.random.seed(seed)

    base_vol = config.MOCK_BASE_VOL_MIN + np.random.uniform() * config.MOCK_BASE_VOL_RANGE

    delta_effect = np.abs(np.asarray(deltas, dtype=float)) * config.MOCK_SMILE_COEF
    tenor_effect = np.arange(len(tenors), dtype=float) * config.MOCK_TERM_COEF
    noise = (np.random.uniform(size=(len(tenors), len(deltas))) - 0.5) * config.MOCK_NOISE_WIDTH

    vols = base_vol + tenor_effect[:, None] + delta_effect[None, :] + noise
    vols = np.clip(vols, config.MOCK_VOL_FLOOR, config.MOCK_VOL_CAP)

    return VolatilitySurface(deltas=tuple(deltas), tenors=tuple(tenors), matrix=vols)
