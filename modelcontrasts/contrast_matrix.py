from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence, Tuple

import numpy
import pandas

from .contrasts import Contrasts, DummyContrasts
from .errors import ContrastsSpecificationError
from .levels import resolve_levels


@dataclass(frozen=True, eq=False)
class ContrastMatrix:
    """
    The result of combining a `Contrasts` specification with the levels
    observed in data.

    Instances are immutable (including the underlying numpy array, which is
    marked as read-only), and so can be shared freely between
    materializations of compatible data.

    Attributes:
        matrix: The coding matrix, with one row per level and one column per
            encoded feature.
        term_names: The names of the encoded features (columns of `matrix`).
        levels: The levels corresponding to the rows of `matrix`.
        contrasts: The `Contrasts` instance used to generate this matrix.
    """

    matrix: numpy.ndarray
    term_names: Tuple[Hashable, ...]
    levels: Tuple[Hashable, ...]
    contrasts: Contrasts

    def __post_init__(self) -> None:
        matrix = numpy.array(self.matrix, dtype=float)
        if matrix.ndim != 2:
            raise ContrastsSpecificationError(
                f"Contrast matrices must be two-dimensional; got shape {matrix.shape}."
            )
        matrix.flags.writeable = False
        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "term_names", tuple(self.term_names))
        object.__setattr__(self, "levels", tuple(self.levels))

        if len(self.levels) != matrix.shape[0]:
            raise ContrastsSpecificationError(
                f"Number of levels ({len(self.levels)}) does not match the number "
                f"of rows in the contrast matrix ({matrix.shape[0]})."
            )
        if len(self.term_names) != matrix.shape[1]:
            raise ContrastsSpecificationError(
                f"Number of term names ({len(self.term_names)}) does not match the "
                f"number of columns in the contrast matrix ({matrix.shape[1]})."
            )

    # numpy arrays do not support the default dataclass equality or hashing.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContrastMatrix):
            return NotImplemented
        return (
            self.levels == other.levels
            and self.term_names == other.term_names
            and self.contrasts == other.contrasts
            and numpy.array_equal(self.matrix, other.matrix)
        )

    def __hash__(self) -> int:
        return hash(
            (self.levels, self.term_names, self.contrasts, self.matrix.tobytes())
        )

    @property
    def full_rank(self) -> bool:
        """
        Whether this contrast matrix spans the space of all levels (and hence
        the intercept).
        """
        return self.matrix.shape[1] == len(self.levels)

    @property
    def base(self) -> Optional[Hashable]:
        """
        The base level of this contrast matrix, or `None` if it has no base
        level (as for dummy contrasts).
        """
        base_index = self.contrasts.find_base_index(self.levels)
        return None if base_index is None else self.levels[base_index]

    def get_term_names(self, name: str) -> List[str]:
        """
        Generate the column names for the features encoded by this matrix for
        a term named `name`; e.g. "<name> - <level>".

        Args:
            name: The name of the term being encoded.
        """
        return [
            self.contrasts.FACTOR_FORMAT.format(name=name, field=field)
            for field in self.term_names
        ]

    def to_frame(self) -> pandas.DataFrame:
        """
        Return the coding matrix as a `pandas.DataFrame` indexed by level,
        with columns labelled by term name.
        """
        return pandas.DataFrame(
            self.matrix,
            index=pandas.Index(self.levels, tupleize_cols=False),
            columns=pandas.Index(self.term_names, tupleize_cols=False),
        )

    def get_coefficient_matrix(self) -> pandas.DataFrame:
        """
        Generate the coefficient matrix; i.e. the matrix with rows
        representing the contrasts effectively estimated by a regression
        against the encoded features (and, for reduced rank encodings, an
        intercept), and columns indicating the weights given to each level.
        This is primarily useful for debugging/introspection.
        """
        if self.full_rank:
            coding_matrix = self.matrix
            row_names: Sequence[Hashable] = self.term_names
        else:
            coding_matrix = numpy.hstack(
                [numpy.ones((len(self.levels), 1)), self.matrix]
            )
            row_names = ["Intercept", *self.term_names]
        return pandas.DataFrame(
            numpy.linalg.inv(coding_matrix),
            index=pandas.Index(row_names, tupleize_cols=False),
            columns=pandas.Index(self.levels, tupleize_cols=False),
        )


def build_contrast_matrix(
    contrasts: Contrasts, levels: Sequence[Hashable]
) -> ContrastMatrix:
    """
    Instantiate the contrast matrix for `contrasts` over the levels observed
    in the data.

    If levels are specified on `contrasts` they are used (after verifying
    that they match the observed levels exactly), and likewise for the base
    level (which otherwise defaults to the first level).

    Args:
        contrasts: The `Contrasts` instance describing the coding scheme.
        levels: The levels observed in the data.
    """
    resolved = resolve_levels(
        contrasts.levels, levels, min_levels=contrasts.min_levels
    )
    base_index = contrasts.find_base_index(resolved)
    return ContrastMatrix(
        matrix=contrasts.get_coding_matrix(base_index, len(resolved)),
        term_names=contrasts.get_coding_column_names(resolved, base_index),
        levels=resolved,
        contrasts=contrasts,
    )


def promote_contrast(contrast_matrix: ContrastMatrix) -> ContrastMatrix:
    """
    Promote a contrast matrix to full rank, by replacing it with the dummy
    encoding over the same (already resolved) levels.

    Args:
        contrast_matrix: The contrast matrix to promote.
    """
    contrasts = DummyContrasts()
    levels = contrast_matrix.levels
    return ContrastMatrix(
        matrix=contrasts.get_coding_matrix(None, len(levels)),
        term_names=contrasts.get_coding_column_names(levels, None),
        levels=levels,
        contrasts=contrasts,
    )
