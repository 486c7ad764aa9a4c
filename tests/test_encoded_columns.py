import copy
import pickle

import numpy
import pandas

from modelcontrasts import TreatmentContrasts, build_contrast_matrix
from modelcontrasts.encoded_columns import EncodedColumns, EncodedColumnsMetadata


def test_encoded_columns_proxy():
    values = pandas.DataFrame({"b": [0.0, 1.0]})
    encoded = EncodedColumns(values, column_names=["b"], name="x")

    assert isinstance(encoded, pandas.DataFrame)
    assert encoded.shape == (2, 1)
    assert encoded.__contrast_metadata__ == EncodedColumnsMetadata(
        column_names=("b",), name="x"
    )

    rewrapped = EncodedColumns(encoded, name="y")
    assert rewrapped.__wrapped__ is values
    assert rewrapped.__contrast_metadata__.column_names == ("b",)
    assert rewrapped.__contrast_metadata__.name == "y"

    replaced = EncodedColumns(values, metadata=encoded.__contrast_metadata__)
    assert replaced.__contrast_metadata__ is encoded.__contrast_metadata__


def test_encoded_columns_copy():
    contrast_matrix = build_contrast_matrix(TreatmentContrasts(), ["a", "b"])
    values = numpy.array([[0.0], [1.0]])
    encoded = EncodedColumns(
        values, column_names=("b",), contrast_matrix=contrast_matrix
    )

    shallow = copy.copy(encoded)
    assert shallow.__wrapped__ is not values
    assert shallow.__contrast_metadata__.contrast_matrix is contrast_matrix

    deep = copy.deepcopy(encoded)
    numpy.testing.assert_array_equal(deep.__wrapped__, values)
    assert deep.__contrast_metadata__.contrast_matrix == contrast_matrix
    assert deep.__contrast_metadata__.column_names == ("b",)


def test_encoded_columns_pickle():
    contrast_matrix = build_contrast_matrix(TreatmentContrasts(), ["a", "b"])
    encoded = EncodedColumns(
        numpy.array([[0.0], [1.0]]),
        column_names=("b",),
        contrast_matrix=contrast_matrix,
        name="x",
    )

    unpickled = pickle.loads(pickle.dumps(encoded))

    numpy.testing.assert_array_equal(unpickled.__wrapped__, [[0.0], [1.0]])
    assert unpickled.__contrast_metadata__.name == "x"
    assert unpickled.__contrast_metadata__.contrast_matrix == contrast_matrix
