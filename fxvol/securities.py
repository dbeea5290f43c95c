"""
Bloomberg security identifiers for an FX vol surface.

The FX options market quotes each tenor as three kinds of instrument:

    ATM   : at-the-money vol, e.g. "EURUSDV1M Curncy"
    RR    : risk reversal at a delta, e.g. "EURUSD25R1M BGN Curncy"
    BF    : butterfly at a delta,     e.g. "EURUSD25B1M BGN Curncy"

With 8 quoted deltas that is 1 + 2*8 = 17 identifiers per tenor. The
gateway caps how many securities a single request may carry, so the
list is split into fixed-size batches before sending.
"""

import re
from typing import List, Sequence

from . import config


_RR_PATTERN = re.compile(r"^[A-Z]{6}\d+R\w+ BGN Curncy$")
_BF_PATTERN = re.compile(r"^[A-Z]{6}\d+B\w+ BGN Curncy$")
_ATM_PATTERN = re.compile(r"^[A-Z]{6}V\w+ Curncy$")


def build_securities(pair: str, tenors: Sequence[str] = None) -> List[str]:
    """
    Build the identifiers needed for one pair's surface.

    Parameters
    ----------
    pair : currency pair code, e.g. "EURUSD"
    tenors : ordered tenor labels (default: config.TENOR_LABELS)

    Returns
    -------
    list of identifiers, ordered tenor by tenor: ATM first, then an
    RR/BF pair for each quoted delta
    """
    if tenors is None:
        tenors = config.TENOR_LABELS

    securities = []
    for tenor in tenors:
        if tenor not in config.TENOR_CODES:
            raise ValueError(f"Unknown tenor: {tenor}. Use one of {', '.join(config.TENOR_LABELS)}.")

        securities.append(f"{pair}{config.TENOR_CODES[tenor]} Curncy")
        for delta in config.QUOTE_DELTAS:
            securities.append(f"{pair}{delta}R{tenor} BGN Curncy")
            securities.append(f"{pair}{delta}B{tenor} BGN Curncy")

    return securities


def classify_security(identifier: str) -> str:
    """Return "atm", "rr" or "bf" for an identifier built by build_securities."""
    if _RR_PATTERN.match(identifier):
        return "rr"
    if _BF_PATTERN.match(identifier):
        return "bf"
    if _ATM_PATTERN.match(identifier):
        return "atm"
    raise ValueError(f"Unrecognized security identifier: {identifier!r}")


def chunk(items: Sequence, size: int = None) -> List[list]:
    """
    Split a sequence into consecutive batches of at most `size` items.

    The last batch may be shorter. Empty input gives an empty list.
    """
    if size is None:
        size = config.BATCH_SIZE
    if size <= 0:
        raise ValueError(f"Batch size must be positive, got {size}")

    items = list(items)
    return [items[i:i + size] for i in range(0, len(items), size)]
