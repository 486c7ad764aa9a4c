from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Hashable,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

try:
    from typing import SupportsIndex
except ImportError:  # pragma: no cover
    from typing_extensions import SupportsIndex

import wrapt

from .utils.sentinels import MISSING, MissingType

if TYPE_CHECKING:  # pragma: no cover
    from .contrast_matrix import ContrastMatrix


T = TypeVar("T")


@dataclass(frozen=True)
class EncodedColumnsMetadata:
    """
    Metadata about a block of columns materialized from categorical data.

    Attributes:
        column_names: The names of the materialized columns.
        contrast_matrix: The `ContrastMatrix` used to encode the data.
        name: The name of the term that was encoded (if any).
        format: The format used to generate column names from the term name
            and the contrast matrix's term names.
    """

    column_names: Tuple[Hashable, ...] = ()
    contrast_matrix: Optional[ContrastMatrix] = None
    name: Optional[str] = None
    format: str = "{name} - {field}"

    def replace(self, **kwargs: Any) -> EncodedColumnsMetadata:
        """
        Return a copy of this `EncodedColumnsMetadata` instance with the
        nominated attributes replaced.
        """
        if not kwargs:
            return self
        return replace(self, **kwargs)


class EncodedColumns(Generic[T], wrapt.ObjectProxy):
    """
    A transparent wrapper around materialized columns (a numpy array, pandas
    DataFrame or scipy sparse matrix) that surfaces an
    `EncodedColumnsMetadata` instance at `<object>.__contrast_metadata__`.
    """

    def __init__(
        self,
        values: Any,
        metadata: Union[EncodedColumnsMetadata, MissingType] = MISSING,
        *,
        column_names: Union[Tuple[Hashable, ...], MissingType] = MISSING,
        contrast_matrix: Union[ContrastMatrix, None, MissingType] = MISSING,
        name: Union[str, None, MissingType] = MISSING,
        format: Union[str, MissingType] = MISSING,  # pylint: disable=redefined-builtin
    ):
        metadata_constructor: Callable = EncodedColumnsMetadata
        metadata_kwargs = dict(
            column_names=tuple(column_names)
            if column_names is not MISSING
            else column_names,
            contrast_matrix=contrast_matrix,
            name=name,
            format=format,
        )
        for key in set(metadata_kwargs):
            if metadata_kwargs[key] is MISSING:
                metadata_kwargs.pop(key)

        if isinstance(values, EncodedColumns):
            metadata_constructor = values.__contrast_metadata__.replace
            values = values.__wrapped__

        if metadata is not MISSING:
            metadata_constructor = metadata.replace

        wrapt.ObjectProxy.__init__(self, values)
        self._self_metadata = metadata_constructor(**metadata_kwargs)

    @property
    def __contrast_metadata__(self) -> EncodedColumnsMetadata:
        return self._self_metadata

    def __repr__(self) -> str:
        return self.__wrapped__.__repr__()  # pragma: no cover

    # Handle copying behaviour

    def __copy__(self) -> EncodedColumns[T]:
        return type(self)(copy.copy(self.__wrapped__), metadata=self._self_metadata)

    def __deepcopy__(self, memo: Any = None) -> EncodedColumns[T]:
        return type(self)(
            copy.deepcopy(self.__wrapped__, memo),
            metadata=copy.deepcopy(self._self_metadata, memo),
        )

    # Handle pickling behaviour

    def __reduce_ex__(
        self, protocol: SupportsIndex
    ) -> Tuple[
        Callable[[Any, Union[EncodedColumnsMetadata, MissingType]], EncodedColumns],
        Tuple[Any, Union[EncodedColumnsMetadata, MissingType]],
    ]:
        return EncodedColumns, (self.__wrapped__, self._self_metadata)
