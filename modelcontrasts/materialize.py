from __future__ import annotations

from typing import Any, Hashable, Optional, Sequence, Type, Union

import numpy
import pandas
import scipy.sparse as spsparse

from .contrast_matrix import ContrastMatrix, build_contrast_matrix, promote_contrast
from .contrasts import Contrasts, get_contrasts
from .encoded_columns import EncodedColumns
from .errors import InvalidCodeError, UnknownLevelError
from .levels import get_levels_and_codes, normalize_levels
from .utils.sentinels import UNSET, UnsetType
from .utils.sparse import codes_to_sparse_indicator_matrix


def get_reindex(
    levels: Sequence[Hashable], contrast_matrix: ContrastMatrix
) -> numpy.ndarray:
    """
    Map the levels of the data onto the rows of a contrast matrix.

    Args:
        levels: The levels of the data, in the order indexed by the data's
            codes.
        contrast_matrix: The contrast matrix whose rows are to be indexed.

    Returns:
        An integer array such that `reindex[code]` is the row of
        `contrast_matrix.matrix` corresponding to `levels[code]`.
    """
    positions = {level: i for i, level in enumerate(contrast_matrix.levels)}
    unknown = [level for level in levels if level not in positions]
    if unknown:
        raise UnknownLevelError(unknown)
    return numpy.array([positions[level] for level in levels], dtype=int)


def materialize(
    codes: Any,
    contrast_matrix: ContrastMatrix,
    levels: Union[Sequence[Hashable], UnsetType] = UNSET,
    *,
    name: Union[str, UnsetType] = UNSET,
    output: str = "numpy",
    index: Optional[pandas.Index] = None,
) -> EncodedColumns:
    """
    Construct the model matrix columns for categorical data encoded as
    integer codes, ensuring that the levels of the data line up with those of
    the contrast matrix.

    Args:
        codes: The per-observation integer codes, indexing into `levels`. A
            code of -1 indicates a missing observation, which is encoded as
            a row of NaNs (or an empty row for sparse output).
        contrast_matrix: The contrast matrix with which to encode the data.
        levels: The levels of the data (in the order indexed by `codes`).
            This need not be in the same order as the levels of the contrast
            matrix, but must not include any level not present in it. If not
            specified, the levels of the contrast matrix are assumed.
        name: The name of the term being encoded. If specified, the column
            names are formatted as "<name> - <term_name>"; otherwise the term
            names of the contrast matrix are used as-is.
        output: The type of data to output. Must be one of "numpy",
            "pandas", or "sparse".
        index: The index to use for pandas output (defaults to a range
            index).
    """
    if output not in ("numpy", "pandas", "sparse"):
        raise ValueError(f"Unknown output type `{repr(output)}`.")

    levels = contrast_matrix.levels if levels is UNSET else normalize_levels(levels)
    reindex = get_reindex(levels, contrast_matrix)

    codes = numpy.asarray(codes)
    if codes.size == 0:
        codes = codes.astype(int).reshape(-1)
    if codes.ndim != 1 or not numpy.issubdtype(codes.dtype, numpy.integer):
        raise InvalidCodeError(
            f"Codes must be a one-dimensional array of integers; got {codes.dtype} "
            f"array of shape {codes.shape}."
        )
    if codes.size and (codes.min() < -1 or codes.max() >= len(levels)):
        raise InvalidCodeError(
            f"Codes must lie between -1 and {len(levels) - 1} (inclusive) for data "
            f"with {len(levels)} levels."
        )

    present = codes != -1
    rows = numpy.full(codes.shape, -1, dtype=int)
    rows[present] = reindex[codes[present]]

    column_names = (
        tuple(contrast_matrix.term_names)
        if name is UNSET or name is None
        else tuple(contrast_matrix.get_term_names(name))
    )

    if output == "sparse":
        encoded = (
            codes_to_sparse_indicator_matrix(rows, len(contrast_matrix.levels))
            @ spsparse.csc_matrix(contrast_matrix.matrix)
        ).tocsc()
    else:
        encoded = numpy.full(
            (codes.shape[0], contrast_matrix.matrix.shape[1]), numpy.nan
        )
        encoded[present] = contrast_matrix.matrix[rows[present]]
        if output == "pandas":
            encoded = pandas.DataFrame(
                encoded,
                columns=pandas.Index(column_names, tupleize_cols=False),
                index=index,
            )

    return EncodedColumns(
        encoded,
        column_names=column_names,
        contrast_matrix=contrast_matrix,
        name=name or None,
        format=contrast_matrix.contrasts.FACTOR_FORMAT,
    )


def materialize_categorical(
    data: Any,
    contrast_matrix: ContrastMatrix,
    *,
    name: Union[str, UnsetType] = UNSET,
    output: str = "numpy",
) -> EncodedColumns:
    """
    Construct the model matrix columns for categorical data using an
    existing contrast matrix.

    The levels of `data` are taken from its categories if it is categorical
    (including unused categories), and otherwise from its sorted unique
    values. All of these must be present in the contrast matrix.

    Args:
        data: The categorical data to encode (a `pandas.Categorical`, a
            `pandas.Series`, or any array-like).
        contrast_matrix: The contrast matrix with which to encode the data.
        name: The name of the term being encoded (see `materialize`).
        output: The type of data to output. Must be one of "numpy",
            "pandas", or "sparse".
    """
    levels, codes = get_levels_and_codes(data)
    return materialize(
        codes,
        contrast_matrix,
        levels,
        name=name,
        output=output,
        index=data.index if isinstance(data, pandas.Series) else None,
    )


def encode_contrasts(
    data: Any,
    contrasts: Union[Contrasts, Type[Contrasts], str, None] = None,
    *,
    levels: Union[Sequence[Hashable], UnsetType] = UNSET,
    name: Union[str, UnsetType] = UNSET,
    full_rank: bool = False,
    output: str = "pandas",
) -> EncodedColumns:
    """
    Encode a categorical dataset into one or more "contrasts".

    Args:
        data: The categorical data array/series to be encoded.
        contrasts: The specification of the contrasts that are to be computed.
            Should be a `Contrasts` instance or subclass, or the name of a
            registered contrast (e.g. "sum"). If not specified, a `Treatment`
            encoding is assumed.
        levels: The complete set of levels (categories) posited to be present
            in the data. This can also be used to reorder the levels as
            needed. Values in the data outside of these levels result in a
            `LevelMismatchError`.
        name: The name of the term being encoded (see `materialize`).
        full_rank: Whether to promote the contrasts to full rank (dummy)
            encoding; for example when the model has no intercept.
        output: The type of data to output. Must be one of "numpy",
            "pandas", or "sparse".
    """
    contrasts = get_contrasts(contrasts)
    data_levels, codes = get_levels_and_codes(data, levels=levels)

    contrast_matrix = build_contrast_matrix(contrasts, data_levels)
    if full_rank:
        contrast_matrix = promote_contrast(contrast_matrix)

    return materialize(
        codes,
        contrast_matrix,
        data_levels,
        name=name,
        output=output,
        index=data.index if isinstance(data, pandas.Series) else None,
    )
