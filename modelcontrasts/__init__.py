from .contrast_matrix import ContrastMatrix, build_contrast_matrix, promote_contrast
from .contrasts import (
    Contrasts,
    ContrastsRegistry,
    DummyContrasts,
    HelmertContrasts,
    SumContrasts,
    TreatmentContrasts,
    get_contrasts,
)
from .encoded_columns import EncodedColumns
from .levels import get_levels_and_codes, resolve_levels
from .materialize import encode_contrasts, materialize, materialize_categorical

try:
    from ._version import __version__, __version_tuple__
except ImportError:  # pragma: no cover
    __version__ = version = "unknown"
    __version_tuple__ = version_tuple = ("unknown",)  # type: ignore

__author__ = "Matthew Wardrop"
__author_email__ = "mpwardrop@gmail.com"

__all__ = [
    "__author__",
    "__author_email__",
    "__version__",
    "__version_tuple__",
    "Contrasts",
    "ContrastsRegistry",
    "TreatmentContrasts",
    "SumContrasts",
    "HelmertContrasts",
    "DummyContrasts",
    "get_contrasts",
    "ContrastMatrix",
    "build_contrast_matrix",
    "promote_contrast",
    "EncodedColumns",
    "resolve_levels",
    "get_levels_and_codes",
    "materialize",
    "materialize_categorical",
    "encode_contrasts",
]
