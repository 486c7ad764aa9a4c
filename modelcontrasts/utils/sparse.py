import numpy
import scipy.sparse as spsparse


def codes_to_sparse_indicator_matrix(
    codes: numpy.ndarray, n_levels: int
) -> spsparse.csc_matrix:
    """
    Build the sparse (column-major) indicator matrix for a vector of integer
    level codes.

    Args:
        codes: The integer code of each observation. A code of -1 indicates
            a missing observation, which results in an empty row.
        n_levels: The number of levels (and hence columns) in the output.

    Returns:
        A `csc_matrix` of shape `(len(codes), n_levels)` with a single 1 in
        each row for which the code is non-negative.
    """
    codes = numpy.asarray(codes, dtype=int)
    present = codes != -1
    indices = numpy.arange(codes.shape[0])[present]
    codes = codes[present]
    return spsparse.csc_matrix(
        (
            numpy.ones(codes.shape[0], dtype=float),  # data
            (indices, codes),  # row  # column
        ),
        shape=(present.shape[0], n_levels),
    )
