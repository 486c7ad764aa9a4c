from __future__ import annotations

import inspect
from abc import abstractmethod
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    ClassVar,
    Dict,
    Hashable,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

import numpy
from interface_meta import InterfaceMeta

from .errors import BaseLevelNotFoundError, ContrastsSpecificationError
from .levels import normalize_levels
from .utils.sentinels import UNSET, UnsetType

if TYPE_CHECKING:
    from .contrast_matrix import ContrastMatrix  # pragma: no cover


@dataclass(frozen=True)
class Contrasts(metaclass=InterfaceMeta):
    """
    The base class for all contrast specifications.

    A contrast specification describes how the levels of a categorical
    variable are to be encoded into numeric columns. It is combined with the
    levels observed in data to generate a `ContrastMatrix`.

    Implementing a new coding scheme only requires subclassing this class and
    overriding `_get_coding_matrix`.

    Attributes:
        base: The base (or "reference") level of the contrasts. If not
            specified, the first level is used. The interpretation of the
            base level depends on the coding scheme.
        levels: The levels over which the contrasts are defined. If
            specified, these must match the levels observed in the data
            exactly, and determine the order of the rows of the contrast
            matrix. If not specified, the observed levels are used.
    """

    INTERFACE_RAISE_ON_VIOLATION = True

    FACTOR_FORMAT: ClassVar[str] = "{name} - {field}"

    # Whether these contrasts drop a level (and so do not span the intercept).
    REDUCED_RANK: ClassVar[bool] = True

    base: Union[Hashable, UnsetType] = UNSET
    levels: Union[Tuple[Hashable, ...], UnsetType] = UNSET

    def __post_init__(self) -> None:
        if self.levels is not UNSET and self.levels is not None:
            object.__setattr__(self, "levels", normalize_levels(self.levels))
        elif self.levels is None:
            object.__setattr__(self, "levels", UNSET)

    @property
    def min_levels(self) -> int:
        """
        The number of levels required to define these contrasts.
        """
        return 2 if self.REDUCED_RANK else 1

    def get_contrast_matrix(self, levels: Sequence[Hashable]) -> ContrastMatrix:
        """
        Build the `ContrastMatrix` for these contrasts over the levels
        observed in the data.

        Args:
            levels: The levels observed in the data.
        """
        from .contrast_matrix import build_contrast_matrix

        return build_contrast_matrix(self, levels)

    def find_base_index(self, levels: Sequence[Hashable]) -> Optional[int]:
        """
        Find the index of the base level in `levels`, or `None` if these
        contrasts do not have a base level.

        Args:
            levels: The resolved levels of the contrast matrix.
        """
        if not self.REDUCED_RANK:
            return None
        if self.base is UNSET:
            return 0
        try:
            return list(levels).index(self.base)
        except ValueError as e:
            raise BaseLevelNotFoundError(self.base, levels) from e

    def get_coding_matrix(self, base_index: Optional[int], n: int) -> numpy.ndarray:
        """
        Generate the coding matrix; i.e. the matrix with a row for each level
        and a column for each encoded feature.

        Args:
            base_index: The index of the base level (or `None` for
                contrasts without a base level).
            n: The number of levels.
        """
        return numpy.asarray(self._get_coding_matrix(base_index, n), dtype=float)

    @abstractmethod
    def _get_coding_matrix(self, base_index: Optional[int], n: int) -> numpy.ndarray:
        """
        Subclasses must override this method to implement the generation of the
        coding matrix.

        Args:
            base_index: The index of the base level (or `None` for
                contrasts without a base level).
            n: The number of levels.
        """

    def get_coding_column_names(
        self, levels: Sequence[Hashable], base_index: Optional[int]
    ) -> Tuple[Hashable, ...]:
        """
        Generate the names for the columns of the coding matrix; by default
        these are all of the levels other than the base level.

        Args:
            levels: The resolved levels of the contrast matrix.
            base_index: The index of the base level.
        """
        return tuple(level for i, level in enumerate(levels) if i != base_index)


@dataclass(frozen=True)
class TreatmentContrasts(Contrasts):
    """
    Treatment coding.

    One indicator column for each non-base level. This is the default in R.
    The columns have non-zero mean and are collinear with an intercept
    column (and lower-order columns for interactions), but are orthogonal to
    each other.
    """

    @Contrasts.override
    def _get_coding_matrix(self, base_index: Optional[int], n: int) -> numpy.ndarray:
        return numpy.eye(n)[:, [i for i in range(n) if i != base_index]]


@dataclass(frozen=True)
class SumContrasts(Contrasts):
    """
    Sum (or Deviation) coding.

    The column for level `x` is 1 where the data equals `x` and -1 where it
    equals the base level. These columns are only centered when all levels
    are equally frequent, and with more than two levels they are never
    orthogonal (so beware of collinearity).
    """

    @Contrasts.override
    def _get_coding_matrix(self, base_index: Optional[int], n: int) -> numpy.ndarray:
        contr = numpy.eye(n)[:, [i for i in range(n) if i != base_index]]
        contr[base_index, :] = -1
        return contr


@dataclass(frozen=True)
class HelmertContrasts(Contrasts):
    """
    Helmert coding.

    Column `i` is -1 for each of the first `i` levels, `i` for level `i + 1`
    and 0 for all subsequent levels; for example, for four levels:

        [[-1, -1, -1],
         [ 1, -1, -1],
         [ 0,  2, -1],
         [ 0,  0,  3]]

    The rows are then reordered such that the row at the position of the
    base level comes first, followed by the remaining rows in their original
    order. Each column contrasts a level with the average of the levels
    before it; when the levels are balanced the resulting columns are
    centered and orthogonal.
    """

    @Contrasts.override
    def _get_coding_matrix(self, base_index: Optional[int], n: int) -> numpy.ndarray:
        contr = numpy.zeros((n, n - 1))
        for i in range(n - 1):
            contr[: i + 1, i] = -1
            contr[i + 1, i] = i + 1

        # Move the base row to the top; the remaining rows retain their order.
        order = [base_index, *(i for i in range(n) if i != base_index)]
        return contr[order, :]


@dataclass(frozen=True)
class DummyContrasts(Contrasts):
    """
    Dummy (full-rank) coding.

    One indicator column for every level, __including__ the base level (the
    `base` attribute is accepted but ignored). This is used when a term must
    not be rank-reduced; for example in a model without an intercept, or for
    an interaction term that is not redundant with lower-order terms.
    """

    REDUCED_RANK: ClassVar[bool] = False

    @Contrasts.override
    def _get_coding_matrix(self, base_index: Optional[int], n: int) -> numpy.ndarray:
        return numpy.eye(n)


class ContrastsRegistry(type):
    """
    The registry of available contrasts, indexed by name.
    """

    treatment = TreatmentContrasts
    sum = SumContrasts
    helmert = HelmertContrasts
    dummy = DummyContrasts

    @classmethod
    def get_registered(cls) -> Dict[str, Type[Contrasts]]:
        return {
            name: value
            for name, value in vars(cls).items()
            if inspect.isclass(value) and issubclass(value, Contrasts)
        }


def get_contrasts(
    contrasts: Union[Contrasts, Type[Contrasts], str, None] = None
) -> Contrasts:
    """
    Normalise a specification of contrasts into a `Contrasts` instance.

    Args:
        contrasts: A `Contrasts` instance, a `Contrasts` subclass (which is
            instantiated with default arguments), the name of a contrast in
            the `ContrastsRegistry` (e.g. "sum"), or `None` (in which case
            treatment coding is used).
    """
    if contrasts is None:
        return TreatmentContrasts()
    if isinstance(contrasts, str):
        registered = ContrastsRegistry.get_registered()
        if contrasts not in registered:
            raise ContrastsSpecificationError(
                f"Unknown contrasts `{contrasts}`. Available contrasts are: "
                f"{sorted(registered)}."
            )
        contrasts = registered[contrasts]
    if inspect.isclass(contrasts) and issubclass(contrasts, Contrasts):
        contrasts = contrasts()  # type: ignore[abstract]
    if not isinstance(contrasts, Contrasts):
        raise ContrastsSpecificationError(
            f"Cannot interpret `{contrasts!r}` as a contrasts specification."
        )
    return contrasts
