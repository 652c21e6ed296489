"""Classification of a prediction series into high, low and current tide events.

A sample is a high (low) tide when it is strictly greater (less) than both of
its neighbors. Flat runs and the first and last samples never qualify. The
sample closest to the reference time, if it lies within CURRENT_TOLERANCE,
is reported as the current level and replaces any high/low classification
it would otherwise have.
"""

import datetime
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
from scipy.signal import argrelextrema

from tidewaves.errors import EmptyInput
from tidewaves.types import RawSample, TideEvent, TideKind

CURRENT_TOLERANCE = datetime.timedelta(minutes=5)


def _current_index(
    samples: Sequence[RawSample], reference_time: datetime.datetime
) -> Optional[int]:
    """Index of the sample closest to reference_time within tolerance, if any.

    On equal distance the earlier sample wins.
    """
    best: Optional[int] = None
    best_offset = CURRENT_TOLERANCE
    for i, sample in enumerate(samples):
        offset = abs(sample.timestamp - reference_time)
        if offset > CURRENT_TOLERANCE:
            continue
        if best is None or offset < best_offset:
            best = i
            best_offset = offset
    return best


def _extrema_kinds(heights: np.ndarray) -> Dict[int, TideKind]:
    """Map interior indexes of strict local maxima/minima to their kind."""
    if len(heights) < 3:
        return {}
    kinds: Dict[int, TideKind] = {}
    # order=1 compares each point with its immediate neighbors only. The
    # default clip mode compares the endpoints with themselves, so they never match.
    for i in argrelextrema(heights, np.greater, order=1)[0]:
        kinds[int(i)] = TideKind.HIGH
    for i in argrelextrema(heights, np.less, order=1)[0]:
        kinds[int(i)] = TideKind.LOW
    return kinds


def classify(
    samples: Sequence[RawSample], reference_time: datetime.datetime
) -> List[TideEvent]:
    """Reduce a prediction series to its significant events.

    Args:
        samples: Water level samples in any order
        reference_time: "Now", as a naive datetime in the station's local time

    Returns:
        High and low tide events plus at most one current event, in ascending
        timestamp order

    Raises:
        EmptyInput: If samples is empty
    """
    if not samples:
        raise EmptyInput("Cannot classify an empty prediction series")

    # sorted() is stable, so samples sharing a timestamp keep their input order
    ordered = sorted(samples, key=lambda s: s.timestamp)
    heights = np.array([s.level for s in ordered], dtype=float)

    kinds = _extrema_kinds(heights)
    current = _current_index(ordered, reference_time)
    if current is not None:
        kinds[current] = TideKind.CURRENT

    events = [
        TideEvent(timestamp=ordered[i].timestamp, height=ordered[i].level, kind=kind)
        for i, kind in sorted(kinds.items())
    ]
    logging.debug(
        f"Classified {len(ordered)} samples into {len(events)} events "
        f"(current={'yes' if current is not None else 'no'})"
    )
    return events
