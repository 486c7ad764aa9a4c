"""
Utilities for reconciling the levels declared on a contrast specification
with the levels observed in categorical data.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Hashable, Iterable, List, Sequence, Tuple, Union

import numpy
import pandas

from .errors import (
    ContrastsSpecificationError,
    InsufficientLevelsError,
    LevelMismatchError,
)
from .utils.sentinels import UNSET, UnsetType


def symmetric_difference(
    a: Iterable[Hashable], b: Iterable[Hashable]
) -> List[Hashable]:
    """
    Compute the levels present in exactly one of `a` and `b`, retaining the
    order in which they appear (levels only in `a` first, followed by those
    only in `b`).
    """
    a, b = list(a), list(b)
    a_set, b_set = set(a), set(b)
    return [level for level in a if level not in b_set] + [
        level for level in b if level not in a_set
    ]


def normalize_levels(levels: Iterable[Hashable]) -> Tuple[Hashable, ...]:
    """
    Convert `levels` into a tuple, checking that no level is repeated.
    """
    levels = tuple(levels)
    counts = Counter(levels)
    duplicates = [level for level, count in counts.items() if count > 1]
    if duplicates:
        raise ContrastsSpecificationError(
            f"Levels must be distinct, but the following were repeated: {duplicates!r}."
        )
    return levels


def resolve_levels(
    declared: Union[Sequence[Hashable], UnsetType, None],
    observed: Sequence[Hashable],
    *,
    min_levels: int = 2,
) -> Tuple[Hashable, ...]:
    """
    Resolve the levels over which a contrast matrix should be constructed.

    If `declared` is provided, it is used (and its order is respected), but
    only if it contains exactly the same levels as `observed`. Levels present
    in the data but not in the declared levels would otherwise be silently
    dropped, and declared levels missing from the data would generate empty
    model matrix columns (and hence a rank-deficient model matrix).

    Args:
        declared: The levels nominated by the contrast specification, or
            `UNSET`/`None` if the observed levels should be used.
        observed: The levels observed in the data.
        min_levels: The minimum number of levels required.

    Returns:
        The resolved levels as a tuple.
    """
    observed = normalize_levels(observed)
    levels = (
        observed
        if declared is UNSET or declared is None
        else normalize_levels(declared)
    )

    mismatched = symmetric_difference(levels, observed)
    if mismatched:
        raise LevelMismatchError(mismatched)

    if len(levels) < min_levels:
        raise InsufficientLevelsError(levels, required=min_levels)

    return levels


def get_levels_and_codes(
    data: Any, levels: Union[Sequence[Hashable], UnsetType, None] = UNSET
) -> Tuple[Tuple[Hashable, ...], numpy.ndarray]:
    """
    Extract the levels and per-observation integer codes of categorical data.

    Categorical data (a `pandas.Categorical` or a categorical
    `pandas.Series`) keeps its own category order, including unused
    categories. Any other array-like is treated as categorical data with
    levels equal to its sorted unique non-null values.

    Args:
        data: The data from which to extract levels and codes.
        levels: If provided, the levels to which the data is conformed (this
            may be used to reorder the levels). Values in the data outside of
            these levels result in a `LevelMismatchError`.

    Returns:
        A tuple of `(levels, codes)`, where `codes` is an integer array with
        one entry per observation indexing into `levels`, and missing values
        are coded as -1.
    """
    if isinstance(data, pandas.Series):
        data = data.array
    if not isinstance(data, pandas.Categorical):
        data = pandas.Categorical(data)

    if levels is not UNSET and levels is not None:
        levels = normalize_levels(levels)
        codes = numpy.asarray(data.codes)
        used = data.categories[numpy.unique(codes[codes != -1])]
        extra = [level for level in used if level not in levels]
        if extra:
            raise LevelMismatchError(
                extra,
                message=f"Data has values outside of the nominated levels: {extra!r}.",
            )
        data = data.set_categories(list(levels))

    return tuple(data.categories), numpy.asarray(data.codes, dtype=int)
